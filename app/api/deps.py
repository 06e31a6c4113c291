import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.constants import AUTH_SIGNING_SECRET, TEST_USER_ID
from app.core.errors import Unauthorized
from app.core.security import resolve_user_id
from app.integrations.storage.base import StorageClient
from app.services.secret_store import SecretStore
from app.services.upload_gateway import UploadGateway

logger = structlog.get_logger()

bearer = HTTPBearer(auto_error=False)


def app_settings(request: Request) -> Settings:
    return request.app.state.settings


def secret_store(request: Request) -> SecretStore:
    return request.app.state.secret_store


def storage_client(request: Request) -> StorageClient:
    return request.app.state.storage


def upload_gateway(request: Request) -> UploadGateway:
    return request.app.state.upload_gateway


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    settings: Settings = Depends(app_settings),
    secrets: SecretStore = Depends(secret_store),
) -> str:
    if settings.skip_auth_for_testing:
        logger.warning("auth_skipped", user_id=TEST_USER_ID)
        return TEST_USER_ID
    if not credentials:
        raise Unauthorized()
    try:
        return resolve_user_id(credentials.credentials, secrets.get_one(AUTH_SIGNING_SECRET))
    except ValueError as exc:
        logger.info("auth_rejected", reason=str(exc))
        raise Unauthorized("Invalid auth token") from exc
