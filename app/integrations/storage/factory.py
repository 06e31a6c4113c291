from app.core.config import Settings
from app.integrations.aws import create_client
from app.integrations.storage.base import StorageClient
from app.integrations.storage.s3 import S3StorageClient


def get_storage_client(settings: Settings) -> StorageClient:
    return S3StorageClient(create_client(settings, "s3"))
