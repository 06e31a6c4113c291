from typing import Any

import boto3
from botocore.client import BaseClient
from botocore.config import Config

from app.core.config import Settings

LOCAL_ACCESS_KEY = "test"
LOCAL_SECRET_KEY = "test"


def client_kwargs(settings: Settings, service: str) -> dict[str, Any]:
    """Keyword arguments for ``boto3.client`` that honour the local-emulator toggle.

    Production relies on the default credential chain (IAM role, env, profile).
    The local emulator gets its endpoint, dummy credentials and, for S3,
    path-style addressing.
    """
    config_options: dict[str, Any] = {
        "connect_timeout": settings.aws_connect_timeout,
        "read_timeout": settings.aws_read_timeout,
        "retries": {"max_attempts": settings.aws_max_attempts, "mode": "standard"},
    }
    if service == "s3":
        config_options["signature_version"] = "s3v4"
        if settings.use_local_endpoint:
            config_options["s3"] = {"addressing_style": "path"}

    kwargs: dict[str, Any] = {"region_name": settings.region, "config": Config(**config_options)}
    if settings.use_local_endpoint:
        kwargs.update(
            endpoint_url=settings.local_endpoint_url,
            aws_access_key_id=LOCAL_ACCESS_KEY,
            aws_secret_access_key=LOCAL_SECRET_KEY,
        )
    return kwargs


def create_client(settings: Settings, service: str) -> BaseClient:
    return boto3.client(service, **client_kwargs(settings, service))
