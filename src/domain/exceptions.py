"""
Domain-specific exceptions.

These exceptions represent business rule violations and domain errors.
They are independent of infrastructure concerns; the presentation layer
maps each of them to a stable, user-safe HTTP response.
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    pass


class AccountAlreadyExistsError(DomainError):
    """Raised when attempting to register an email that already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Account with email '{email}' already exists")


class AccountNotFoundError(DomainError):
    """Raised when an account cannot be found."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Account '{identifier}' not found")


class AccountAlreadyActivatedError(DomainError):
    """Raised when a new activation code is requested for an enabled account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Account with email '{email}' is already activated")


class InvalidEmailError(DomainError):
    """Raised when an email format is invalid."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Invalid email format: '{email}'")


class WeakPasswordError(DomainError):
    """Raised when a password doesn't meet security requirements."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Password does not meet requirements: {reason}")


class InvalidCredentialsError(DomainError):
    """
    Raised when email/password authentication fails.

    Unknown account, wrong password, disabled and locked accounts all
    raise this same error so callers cannot tell them apart.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class RoleNotConfiguredError(DomainError):
    """Raised when a required role is missing from the role catalog."""

    def __init__(self, role_name: str):
        self.role_name = role_name
        super().__init__(f"Role '{role_name}' is not configured")


class InvalidActivationCodeError(DomainError):
    """Raised when an activation code value is malformed."""

    def __init__(self) -> None:
        super().__init__("Invalid activation code provided")


class ActivationCodeNotFoundError(DomainError):
    """Raised when the submitted activation code does not exist."""

    def __init__(self) -> None:
        super().__init__("Activation code not found")


class ActivationCodeExpiredError(DomainError):
    """
    Raised when the submitted activation code has expired.

    By the time this is raised a replacement code has already been
    issued and its email enqueued.
    """

    def __init__(self, email: str | None = None) -> None:
        self.email = email
        super().__init__(
            "Activation code has expired. A new activation code has been sent to your email"
        )


class ActivationCodeAlreadyValidatedError(DomainError):
    """Raised when stamping a validation time on an already-validated code."""

    def __init__(self) -> None:
        super().__init__("Activation code has already been validated")


class InvalidTokenError(DomainError):
    """Raised when a bearer token is malformed, expired or fails signature checks."""

    def __init__(self, reason: str = "Invalid token") -> None:
        self.reason = reason
        super().__init__(reason)


class EmailDeliveryError(DomainError):
    """
    Raised when the activation email could not be handed to the mail queue.

    The account and the activation code stay persisted.
    """

    def __init__(self, email: str, reason: str):
        self.email = email
        self.reason = reason
        super().__init__(f"Failed to dispatch activation email to '{email}': {reason}")


class ActivationCodeCollisionError(DomainError):
    """Raised by storage when a pending activation code already uses this value."""

    def __init__(self, code: str):
        self.code = code
        super().__init__("Activation code value is already pending")


class ActivationCodeUnavailableError(DomainError):
    """
    Raised when no free activation code value could be drawn.

    Nothing is persisted; the caller may retry later.
    """

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No free activation code value after {attempts} attempts")
