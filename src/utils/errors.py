"""
Failure conditions surfaced to the user.

Every remote or validation failure ends up as one of these; screens catch
StorefrontError and show `user_message`. None of them is fatal.
"""

from typing import Optional


class StorefrontError(Exception):
    default_message = "Something went wrong. Please try again."

    def __init__(self, user_message: Optional[str] = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class ServiceUnavailable(StorefrontError):
    default_message = (
        "Database connection required. Please configure the store service first."
    )


class DuplicateEmail(StorefrontError):
    default_message = (
        "This email is already registered. "
        "Please use a different email or try logging in."
    )


class InvalidCredentials(StorefrontError):
    default_message = (
        "Invalid email or password. Please check your credentials and try again."
    )


class _RemoteFailure(StorefrontError):
    """Failure that carries the remote service's own message."""

    prefix = "Request failed"

    def __init__(self, remote_message: str = ""):
        self.remote_message = remote_message
        if remote_message:
            super().__init__(f"{self.prefix}: {remote_message}")
        else:
            super().__init__(f"{self.prefix}.")


class RegistrationFailed(_RemoteFailure):
    prefix = "Registration failed"


class LoginFailed(_RemoteFailure):
    prefix = "Login failed"


class ProfileUpdateFailed(_RemoteFailure):
    prefix = "Profile update failed"


class OrdersFetchFailed(_RemoteFailure):
    prefix = "Failed to fetch orders"


class CatalogFetchFailed(_RemoteFailure):
    prefix = "Failed to load products"


class OrderCreationFailed(_RemoteFailure):
    prefix = "Failed to create order"


class ValidationFailed(StorefrontError):
    """
    A required field is missing, the cart is empty, or a remote payload did
    not have the expected shape.
    """

    default_message = "Please check the highlighted field."

    def __init__(self, user_message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(user_message)
        self.field = field


class SessionExpired(ValidationFailed):
    """The stored login ran out (or was cleared) while the app kept a user."""

    default_message = "Your session has expired. Please log in again."

    def __init__(self, user_message: Optional[str] = None):
        super().__init__(user_message, field="session")
