"""Domain errors for signup, signin and access control.

Every error carries the HTTP status and the client-facing message; the
exception handlers in bastion.main render them as {"message": ...}.
"""


class AuthError(Exception):
    """Base class for failures that are converted to a response at the boundary."""

    status_code: int = 400
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InputValidationError(AuthError):
    """Missing or malformed request fields."""

    status_code = 400
    default_message = "Failed! Invalid request."


class InvalidRoleError(AuthError):
    """Signup requested a role outside the catalog."""

    status_code = 400

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Failed! Role {role} does not exist!")


class DuplicateUserError(AuthError):
    """Username or email already registered."""

    status_code = 400
    default_message = "Failed! Username or email is already in use!"


class UserNotFoundError(AuthError):
    status_code = 404
    default_message = "User Not found."


class InvalidCredentialsError(AuthError):
    status_code = 401
    default_message = "Invalid Password!"


class NoTokenError(AuthError):
    """No access token header on a protected request."""

    status_code = 403
    default_message = "No token provided!"


class InvalidTokenError(AuthError):
    """Token is malformed, tampered with, signed with another secret, or of the wrong kind."""

    status_code = 401
    default_message = "Unauthorized!"


class TokenExpiredError(AuthError):
    status_code = 401
    default_message = "Unauthorized! Access Token was expired!"


class ForbiddenError(AuthError):
    """Authenticated, but the caller lacks the required role."""

    status_code = 403
    default_message = "Forbidden!"


class DirectoryUnavailableError(AuthError):
    """The user directory (database) could not be reached in time."""

    status_code = 503
    default_message = "Service temporarily unavailable."
