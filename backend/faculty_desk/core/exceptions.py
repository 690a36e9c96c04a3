class AppError(Exception):
    """Base class for all application exceptions."""

    kind = "app_error"

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised for malformed, missing or contradictory input the caller can fix."""

    kind = "validation_error"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)


class NotFoundError(AppError):
    """Raised when a referenced account or schedule entry does not exist."""

    kind = "not_found"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=404, details=details)


class ConflictError(AppError):
    """Raised when a unique field (username, email) is already taken."""

    kind = "conflict"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)


class AuthenticationError(AppError):
    """Raised when the request carries no valid session."""

    kind = "authentication_required"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class StoreError(AppError):
    """Raised when an underlying database operation fails. Never retried."""

    kind = "store_error"

    def __init__(self, message: str = "Database error", details: dict = None):
        super().__init__(message, status_code=500, details=details)
