from app.core.constants import ALLOWED_UPLOAD_MIME, MAX_UPLOAD_BYTES
from app.core.errors import InvalidType, MissingFile, TooLarge


def normalize_content_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_content_type(content_type: str | None) -> None:
    if normalize_content_type(content_type) not in ALLOWED_UPLOAD_MIME:
        raise InvalidType()


def validate_upload(content_type: str | None, size: int, *, payload_present: bool = True) -> None:
    if not payload_present:
        raise MissingFile()
    validate_content_type(content_type)
    if size > MAX_UPLOAD_BYTES:
        raise TooLarge()
