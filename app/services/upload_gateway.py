from collections.abc import Callable
from dataclasses import dataclass

import structlog
from starlette.concurrency import run_in_threadpool

from app.core.constants import (
    DEFAULT_FILENAME,
    PRESIGN_DOWNLOAD_TTL_SECONDS,
    PRESIGN_UPLOAD_TTL_SECONDS,
    LogicalType,
)
from app.core.errors import NotFound, Unauthorized
from app.integrations.storage.base import ObjectDescriptor, ObjectMetadata, StorageClient
from app.models.uploads import (
    PresignedDownload,
    PresignedUpload,
    UploadRequest,
    UploadResult,
    canonical_url,
)
from app.services.key_namespace import Clock, derive_key, owner_prefix, route_bucket, system_clock
from app.services.upload_validator import validate_content_type, validate_upload

logger = structlog.get_logger()


@dataclass(frozen=True)
class _Target:
    bucket: str
    key: str


def _require_owner(owner_id: str | None) -> str:
    if not owner_id:
        raise Unauthorized()
    return owner_id


class UploadGateway:
    """Entry points for both upload paths plus read-side helpers.

    Blocking storage calls run in the threadpool so a cancelled request stops
    waiting on them and never yields a result.
    """

    def __init__(self, storage: StorageClient, clock: Clock = system_clock):
        self.storage = storage
        self.clock = clock

    async def proxied_upload(self, request: UploadRequest) -> UploadResult:
        target = self._prepare(
            request.owner_id,
            request.logical_type,
            request.filename,
            lambda: validate_upload(
                request.content_type,
                request.size,
                payload_present=request.has_payload,
            ),
        )
        payload = request.payload if request.payload is not None else await request.reader()
        await run_in_threadpool(
            self.storage.put, target.bucket, target.key, payload, request.content_type
        )
        logger.info("upload_stored", bucket=target.bucket, key=target.key, size=len(payload))
        return UploadResult(
            bucket=target.bucket,
            key=target.key,
            canonical_url=canonical_url(target.bucket, target.key),
            filename=request.filename,
            size=len(payload),
            content_type=request.content_type,
        )

    async def request_presigned_upload(
        self,
        owner_id: str | None,
        logical_type: LogicalType | str | None,
        filename: str,
        content_type: str,
        ttl_seconds: int | None = None,
    ) -> PresignedUpload:
        # The object size is unknown here, so MAX_UPLOAD_BYTES is not enforced on this path.
        ttl = ttl_seconds or PRESIGN_UPLOAD_TTL_SECONDS
        target = self._prepare(owner_id, logical_type, filename, lambda: validate_content_type(content_type))
        url = await run_in_threadpool(self.storage.presign_put, target.bucket, target.key, content_type, ttl)
        logger.info("upload_presigned", bucket=target.bucket, key=target.key, expires_in=ttl)
        return PresignedUpload(url=url, bucket=target.bucket, key=target.key, expires_in_seconds=ttl)

    async def list_uploads(
        self, owner_id: str | None, logical_type: LogicalType | str | None
    ) -> list[ObjectDescriptor]:
        owner = _require_owner(owner_id)
        bucket = route_bucket(logical_type)
        return await run_in_threadpool(lambda: list(self.storage.list(bucket, owner_prefix(owner))))

    async def request_download_url(
        self,
        owner_id: str | None,
        logical_type: LogicalType | str | None,
        key: str,
        ttl_seconds: int = PRESIGN_DOWNLOAD_TTL_SECONDS,
    ) -> PresignedDownload:
        target = self._owned(owner_id, logical_type, key)
        url = await run_in_threadpool(self.storage.presign_get, target.bucket, target.key, ttl_seconds)
        return PresignedDownload(url=url, bucket=target.bucket, key=target.key, expires_in_seconds=ttl_seconds)

    async def describe_upload(
        self, owner_id: str | None, logical_type: LogicalType | str | None, key: str
    ) -> ObjectMetadata:
        target = self._owned(owner_id, logical_type, key)
        return await run_in_threadpool(self.storage.head, target.bucket, target.key)

    def _prepare(
        self,
        owner_id: str | None,
        logical_type: LogicalType | str | None,
        filename: str,
        validate: Callable[[], None],
    ) -> _Target:
        owner = _require_owner(owner_id)
        validate()
        return _Target(
            bucket=route_bucket(logical_type),
            key=derive_key(owner, filename or DEFAULT_FILENAME, self.clock),
        )

    def _owned(self, owner_id: str | None, logical_type: LogicalType | str | None, key: str) -> _Target:
        owner = _require_owner(owner_id)
        if not key or not key.startswith(owner_prefix(owner)):
            raise NotFound(f"{key or 'object'} not found")
        return _Target(bucket=route_bucket(logical_type), key=key)
