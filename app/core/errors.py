from enum import StrEnum

from fastapi import status


class ErrorCode(StrEnum):
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TYPE = "INVALID_TYPE"
    TOO_LARGE = "TOO_LARGE"
    MISSING_FILE = "MISSING_FILE"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    SECRETS_DEGRADED = "SECRETS_DEGRADED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base for every failure that is rendered to clients as ``{error, code}``."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code.value}


class Unauthorized(AppError):
    code = ErrorCode.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized - Please sign in"


class UploadRejected(AppError):
    """Client-correctable validation failure, raised before any storage call."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidType(UploadRejected):
    code = ErrorCode.INVALID_TYPE
    default_message = "Invalid file type. Only PDF, DOC, DOCX, and TXT are allowed."


class TooLarge(UploadRejected):
    code = ErrorCode.TOO_LARGE
    default_message = "File too large. Maximum size is 5MB."


class MissingFile(UploadRejected):
    code = ErrorCode.MISSING_FILE
    default_message = "No file provided"


class InvalidRequest(AppError):
    code = ErrorCode.INVALID_REQUEST
    status_code = 422
    default_message = "Invalid request"


class NotFound(AppError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Object not found"


class StorageUnavailable(AppError):
    code = ErrorCode.STORAGE_UNAVAILABLE
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage request failed. Please try again."


class SecretsDegraded(AppError):
    # never leaves SecretStore; signals the environment fallback was taken
    code = ErrorCode.SECRETS_DEGRADED
    default_message = "Secrets service unavailable"
