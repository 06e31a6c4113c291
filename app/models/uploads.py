from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from app.core.constants import LogicalType


@dataclass(frozen=True)
class UploadRequest:
    owner_id: str | None
    logical_type: LogicalType
    filename: str
    content_type: str
    size: int
    payload: bytes | None = None
    # reads the body once validation has passed; used when payload is None
    reader: Callable[[], Awaitable[bytes]] | None = None

    @property
    def has_payload(self) -> bool:
        return self.payload is not None or self.reader is not None


@dataclass(frozen=True)
class UploadResult:
    bucket: str
    key: str
    canonical_url: str
    filename: str
    size: int
    content_type: str


@dataclass(frozen=True)
class PresignedUpload:
    url: str
    bucket: str
    key: str
    expires_in_seconds: int


@dataclass(frozen=True)
class PresignedDownload:
    url: str
    bucket: str
    key: str
    expires_in_seconds: int


def canonical_url(bucket: str, key: str) -> str:
    return f"s3://{bucket}/{key}"
