from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

from app.api.deps import secret_store, storage_client
from app.core.constants import Bucket
from app.core.errors import StorageUnavailable
from app.integrations.storage.base import StorageClient
from app.services.secret_store import SecretStore

router = APIRouter(tags=["health"])
REQUEST_COUNTER = Counter("uploads_api_health_requests_total", "Health probe requests", ["path"])


@router.get("/health/live")
async def health_live():
    REQUEST_COUNTER.labels(path="/health/live").inc()
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(
    storage: StorageClient = Depends(storage_client),
    secrets: SecretStore = Depends(secret_store),
):
    REQUEST_COUNTER.labels(path="/health/ready").inc()
    try:
        for bucket in Bucket:
            await run_in_threadpool(storage.ping, bucket.value)
    except StorageUnavailable:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "storage": "unreachable"},
        )
    return {"status": "ready", "storage": storage.name, "secrets": secrets.source or "not_loaded"}


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics():
    return PlainTextResponse(generate_latest().decode("utf-8"), media_type=CONTENT_TYPE_LATEST)
