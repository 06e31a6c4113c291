from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.errors import AppError, ErrorCode, InvalidRequest, StorageUnavailable
from app.core.logging import configure_logging
from app.integrations.storage.base import StorageClient
from app.integrations.storage.factory import get_storage_client
from app.services.secret_store import SecretStore, build_secret_store
from app.services.upload_gateway import UploadGateway

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    logger.info(
        "startup",
        env=settings.app_env,
        region=settings.region,
        local_endpoint=settings.use_local_endpoint,
        secrets_service=settings.use_secrets_service,
    )
    if settings.skip_auth_for_testing:
        logger.warning("auth_disabled_for_testing")
    yield
    logger.info("shutdown")


def create_app(
    settings: Settings | None = None,
    storage: StorageClient | None = None,
    secrets: SecretStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    app.state.settings = settings
    app.state.storage = storage or get_storage_client(settings)
    app.state.secret_store = secrets or build_secret_store(settings)
    app.state.upload_gateway = UploadGateway(app.state.storage)

    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, StorageUnavailable):
            logger.error("storage_unavailable", path=request.url.path, cause=repr(exc.__cause__))
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError):
        fields = sorted({".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()})
        error = InvalidRequest(f"Invalid or missing parameters: {', '.join(fields)}")
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.exception("unhandled_exception", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value},
        )

    app.include_router(api_router, prefix=settings.api_prefix)
    return app
