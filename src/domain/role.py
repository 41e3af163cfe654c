"""
Role entity.

Roles are referenced by name from accounts. The catalog is read-only from
the authentication core's point of view; rows are seeded at startup.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass
class Role:
    """A named authority that can be assigned to accounts."""

    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None
