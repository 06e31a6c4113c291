import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import create_access_token
from app.main import create_app
from app.services.secret_store import SecretStore
from tests.fakes import SIGNING_KEY, InMemoryStorageClient


@pytest.fixture
def storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        use_local_endpoint=False,
        use_secrets_service=False,
        skip_auth_for_testing=False,
        log_json=False,
    )


@pytest.fixture
def secrets(settings: Settings) -> SecretStore:
    return SecretStore(settings=settings, environ={"CLERK_SECRET_KEY": SIGNING_KEY})


@pytest.fixture
def client(settings: Settings, storage: InMemoryStorageClient, secrets: SecretStore) -> TestClient:
    app = create_app(settings=settings, storage=storage, secrets=secrets)
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = create_access_token("user-42", SIGNING_KEY)
    return {"Authorization": f"Bearer {token}"}
