from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from prometheus_client import Counter

from app.api.deps import get_current_user_id, upload_gateway
from app.core.constants import DEFAULT_CONTENT_TYPE, DEFAULT_FILENAME, LogicalType
from app.core.errors import AppError
from app.models.uploads import UploadRequest
from app.schemas.uploads import (
    ErrorResponse,
    FileMetadataOut,
    PresignedDownloadResponse,
    PresignedUploadResponse,
    StoredFileList,
    StoredFileOut,
    UploadResponse,
)
from app.services.key_namespace import route_bucket
from app.services.upload_gateway import UploadGateway

router = APIRouter(
    prefix="/upload",
    tags=["upload"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
UPLOAD_COUNTER = Counter("uploads_total", "Upload requests by flow and outcome", ["flow", "outcome"])


@router.post("", response_model=UploadResponse)
async def upload_file(
    file: UploadFile | None = File(default=None),
    upload_type: str = Form(default=LogicalType.DOCUMENT.value, alias="type"),
    user_id: str = Depends(get_current_user_id),
    gateway: UploadGateway = Depends(upload_gateway),
):
    request = UploadRequest(
        owner_id=user_id,
        logical_type=LogicalType.parse(upload_type),
        filename=(file.filename if file is not None else None) or DEFAULT_FILENAME,
        content_type=(file.content_type if file is not None else None) or "",
        size=(file.size or 0) if file is not None else 0,
        reader=file.read if file is not None else None,
    )
    try:
        result = await gateway.proxied_upload(request)
    except AppError as exc:
        UPLOAD_COUNTER.labels(flow="proxied", outcome=exc.code.value).inc()
        raise
    UPLOAD_COUNTER.labels(flow="proxied", outcome="ok").inc()
    return UploadResponse(
        bucket=result.bucket,
        key=result.key,
        url=result.canonical_url,
        filename=result.filename,
        size=result.size,
        type=result.content_type,
    )


@router.get("", response_model=PresignedUploadResponse)
async def presign_upload(
    upload_type: str = Query(default=LogicalType.DOCUMENT.value, alias="type"),
    filename: str = Query(default=DEFAULT_FILENAME),
    content_type: str = Query(default=DEFAULT_CONTENT_TYPE, alias="contentType"),
    user_id: str = Depends(get_current_user_id),
    gateway: UploadGateway = Depends(upload_gateway),
):
    try:
        presigned = await gateway.request_presigned_upload(
            owner_id=user_id,
            logical_type=upload_type,
            filename=filename,
            content_type=content_type,
        )
    except AppError as exc:
        UPLOAD_COUNTER.labels(flow="presigned", outcome=exc.code.value).inc()
        raise
    UPLOAD_COUNTER.labels(flow="presigned", outcome="ok").inc()
    return PresignedUploadResponse(
        upload_url=presigned.url,
        bucket=presigned.bucket,
        key=presigned.key,
        expires_in=presigned.expires_in_seconds,
    )


@router.get("/files", response_model=StoredFileList)
async def list_files(
    upload_type: str = Query(default=LogicalType.DOCUMENT.value, alias="type"),
    user_id: str = Depends(get_current_user_id),
    gateway: UploadGateway = Depends(upload_gateway),
):
    items = await gateway.list_uploads(user_id, upload_type)
    return StoredFileList(
        bucket=route_bucket(upload_type),
        files=[StoredFileOut(key=item.key, size=item.size, last_modified=item.last_modified) for item in items],
    )


@router.get("/download-url", response_model=PresignedDownloadResponse)
async def download_url(
    key: str,
    upload_type: str = Query(default=LogicalType.DOCUMENT.value, alias="type"),
    user_id: str = Depends(get_current_user_id),
    gateway: UploadGateway = Depends(upload_gateway),
):
    presigned = await gateway.request_download_url(user_id, upload_type, key)
    return PresignedDownloadResponse(
        download_url=presigned.url,
        bucket=presigned.bucket,
        key=presigned.key,
        expires_in=presigned.expires_in_seconds,
    )


@router.get("/metadata", response_model=FileMetadataOut)
async def file_metadata(
    key: str,
    upload_type: str = Query(default=LogicalType.DOCUMENT.value, alias="type"),
    user_id: str = Depends(get_current_user_id),
    gateway: UploadGateway = Depends(upload_gateway),
):
    meta = await gateway.describe_upload(user_id, upload_type, key)
    return FileMetadataOut(
        bucket=route_bucket(upload_type),
        key=key,
        content_type=meta.content_type,
        size=meta.size,
        last_modified=meta.last_modified,
        metadata=meta.metadata,
    )
