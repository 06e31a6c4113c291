from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class StoredObject:
    bucket: str
    key: str


@dataclass(frozen=True)
class ObjectDescriptor:
    key: str
    size: int
    last_modified: datetime | None


@dataclass(frozen=True)
class ObjectMetadata:
    content_type: str | None
    size: int
    last_modified: datetime | None
    metadata: dict[str, str] = field(default_factory=dict)


class StorageClient:
    """Narrow surface over the object store.

    Implementations raise ``StorageUnavailable`` on transport or auth failures
    and ``NotFound`` from ``head`` when the key is absent. They never retry.
    """

    name: str = "base"

    def put(self, bucket: str, key: str, payload: bytes, content_type: str) -> StoredObject:
        raise NotImplementedError

    def presign_put(self, bucket: str, key: str, content_type: str, ttl_seconds: int) -> str:
        raise NotImplementedError

    def presign_get(self, bucket: str, key: str, ttl_seconds: int) -> str:
        raise NotImplementedError

    def list(self, bucket: str, prefix: str | None = None) -> Iterator[ObjectDescriptor]:
        raise NotImplementedError

    def head(self, bucket: str, key: str) -> ObjectMetadata:
        raise NotImplementedError

    def ping(self, bucket: str) -> None:
        raise NotImplementedError
