class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` and the HTTP status
    the controllers render it with.
    """

    code = "DOMAIN_ERROR"
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Raised when the requested row does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class AuthenticationError(DomainError):
    """Raised when a request carries no valid credentials."""

    code = "UNAUTHORIZED"
    http_status = 401


class StorageError(DomainError):
    """Raised when the database cannot be reached or a statement fails."""

    code = "STORAGE_ERROR"
    http_status = 500


class EncodingError(DomainError):
    """Raised when a sign-out token cannot be built or read back."""

    code = "ENCODING_ERROR"
    http_status = 500
