from enum import StrEnum


class LogicalType(StrEnum):
    RESUME = "resume"
    DOCUMENT = "document"

    @classmethod
    def parse(cls, value: "str | LogicalType | None") -> "LogicalType":
        """Exact, case-sensitive match; anything else is a document."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value or "")
        except ValueError:
            return cls.DOCUMENT


class Bucket(StrEnum):
    RESUMES = "ai-powered-resumes"
    DOCUMENTS = "ai-powered-documents"


BUCKET_ROUTES: dict[LogicalType, Bucket] = {
    LogicalType.RESUME: Bucket.RESUMES,
    LogicalType.DOCUMENT: Bucket.DOCUMENTS,
}

ALLOWED_UPLOAD_MIME = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    }
)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

PRESIGN_UPLOAD_TTL_SECONDS = 900
PRESIGN_DOWNLOAD_TTL_SECONDS = 3600

DEFAULT_FILENAME = "file"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEST_USER_ID = "test-user-123"

AUTH_SIGNING_SECRET = "CLERK_SECRET_KEY"
FALLBACK_SECRET_NAMES = (
    AUTH_SIGNING_SECRET,
    "HUME_API_KEY",
    "HUME_SECRET_KEY",
    "GEMINI_API_KEY",
    "ARCJET_KEY",
)
