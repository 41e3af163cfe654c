"""
Identity capabilities.

Two narrow structural interfaces describing what the authentication core
needs from a principal. Account implements both without inheriting from
either.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Identity(Protocol):
    """Anything that can be named as the subject of a token."""

    @property
    def name(self) -> str: ...


@runtime_checkable
class Authenticatable(Protocol):
    """A principal that can be checked for login and granted authorities."""

    enabled: bool
    locked: bool

    @property
    def credentials(self) -> str: ...

    @property
    def authorities(self) -> frozenset[str]: ...
