"""
Email service interface (Port).

Defines the contract for sending emails.
The infrastructure layer will provide the adapter implementation.
"""

from abc import ABC, abstractmethod


class EmailService(ABC):
    """
    Abstract interface for email sending.

    This is a "port" in Hexagonal Architecture. The application layer never
    calls it inline: delivery runs in a background worker (see TaskQueue).
    """

    @abstractmethod
    async def send_activation_code(
        self,
        email: str,
        full_name: str,
        code: str,
        activation_url: str,
    ) -> None:
        """
        Send an activation code to a user's email.

        Args:
            email: Recipient's email address
            full_name: Recipient's display name used in the greeting
            code: The numeric activation code
            activation_url: Front-end page where the code can be submitted

        Raises:
            EmailServiceError: If sending fails
        """
        pass
