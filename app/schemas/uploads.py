from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    success: bool = True
    bucket: str
    key: str
    url: str
    filename: str
    size: int
    type: str


class PresignedUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(alias="uploadUrl")
    bucket: str
    key: str
    expires_in: int = Field(alias="expiresIn")


class PresignedDownloadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    download_url: str = Field(alias="downloadUrl")
    bucket: str
    key: str
    expires_in: int = Field(alias="expiresIn")


class StoredFileOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    size: int
    last_modified: datetime | None = Field(default=None, alias="lastModified")


class StoredFileList(BaseModel):
    bucket: str
    files: list[StoredFileOut]


class FileMetadataOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bucket: str
    key: str
    content_type: str | None = Field(default=None, alias="contentType")
    size: int
    last_modified: datetime | None = Field(default=None, alias="lastModified")
    metadata: dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    code: str
