from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from app.core.errors import NotFound, StorageUnavailable
from app.integrations.storage.base import ObjectDescriptor, ObjectMetadata, StorageClient, StoredObject

logger = structlog.get_logger()

_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}


@contextmanager
def _storage_errors(operation: str, bucket: str, key: str | None = None):
    try:
        yield
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "")
        logger.error("storage_error", operation=operation, bucket=bucket, key=key, code=code, error=str(exc))
        raise StorageUnavailable() from exc
    except BotoCoreError as exc:
        logger.error("storage_error", operation=operation, bucket=bucket, key=key, error=str(exc))
        raise StorageUnavailable() from exc


class S3StorageClient(StorageClient):
    name = "s3"

    def __init__(self, client: BaseClient) -> None:
        self.client = client

    def put(self, bucket: str, key: str, payload: bytes, content_type: str) -> StoredObject:
        with _storage_errors("put", bucket, key):
            self.client.put_object(Bucket=bucket, Key=key, Body=payload, ContentType=content_type)
        return StoredObject(bucket=bucket, key=key)

    def presign_put(self, bucket: str, key: str, content_type: str, ttl_seconds: int) -> str:
        with _storage_errors("presign_put", bucket, key):
            return self.client.generate_presigned_url(
                "put_object",
                Params={"Bucket": bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=ttl_seconds,
                HttpMethod="PUT",
            )

    def presign_get(self, bucket: str, key: str, ttl_seconds: int) -> str:
        with _storage_errors("presign_get", bucket, key):
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=ttl_seconds,
                HttpMethod="GET",
            )

    def list(self, bucket: str, prefix: str | None = None) -> Iterator[ObjectDescriptor]:
        params = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        with _storage_errors("list", bucket, prefix):
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for item in page.get("Contents", []):
                    yield ObjectDescriptor(
                        key=item["Key"],
                        size=item.get("Size", 0),
                        last_modified=item.get("LastModified"),
                    )

    def head(self, bucket: str, key: str) -> ObjectMetadata:
        try:
            response = self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code", "") in _MISSING_KEY_CODES:
                raise NotFound(f"{key} not found") from exc
            logger.error("storage_error", operation="head", bucket=bucket, key=key, error=str(exc))
            raise StorageUnavailable() from exc
        except BotoCoreError as exc:
            logger.error("storage_error", operation="head", bucket=bucket, key=key, error=str(exc))
            raise StorageUnavailable() from exc
        return ObjectMetadata(
            content_type=response.get("ContentType"),
            size=response.get("ContentLength", 0),
            last_modified=response.get("LastModified"),
            metadata=dict(response.get("Metadata") or {}),
        )

    def ping(self, bucket: str) -> None:
        with _storage_errors("ping", bucket):
            self.client.head_bucket(Bucket=bucket)
