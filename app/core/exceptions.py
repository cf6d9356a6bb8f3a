from fastapi import HTTPException
from app.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


# -------------------------
# DOCUMENT ACTION ERRORS
# -------------------------
class DocumentActionError(Exception):
    """Recoverable failure of a document action, reported as a rejection."""

    status_code = 400
    error_code = ErrorCode.DOCUMENT_INVALID_STATE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: ErrorCode | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


class PreconditionViolation(DocumentActionError):
    pass


class ConversionError(DocumentActionError):
    error_code = ErrorCode.DOCUMENT_NOT_CONVERTIBLE


class AuthorizationDenied(DocumentActionError):
    status_code = 403
    error_code = ErrorCode.PERMISSION_DENIED


class UnknownAction(DocumentActionError):
    error_code = ErrorCode.DOCUMENT_UNKNOWN_ACTION

    def __init__(self, token: str):
        super().__init__(f"The requested action `{token}` is not available.")
        self.token = token


class ActionNotImplemented(DocumentActionError):
    status_code = 501
    error_code = ErrorCode.NOT_IMPLEMENTED
