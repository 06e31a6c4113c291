from app.core.config import Settings
from app.integrations.aws import LOCAL_ACCESS_KEY, client_kwargs


def test_legacy_env_names_are_accepted(monkeypatch):
    monkeypatch.setenv("USE_LOCALSTACK", "true")
    monkeypatch.setenv("LOCALSTACK_ENDPOINT", "http://localstack:4566")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("USE_SECRETS_MANAGER", "true")
    monkeypatch.setenv("SECRETS_MANAGER_NAME", "prod-secrets")

    settings = Settings(_env_file=None)

    assert settings.use_local_endpoint is True
    assert settings.local_endpoint_url == "http://localstack:4566"
    assert settings.region == "eu-west-1"
    assert settings.use_secrets_service is True
    assert settings.secrets_service_identifier == "prod-secrets"


def test_defaults(monkeypatch):
    for name in ("USE_LOCALSTACK", "USE_LOCAL_ENDPOINT", "AWS_REGION", "REGION", "USE_SECRETS_MANAGER", "USE_SECRETS_SERVICE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.use_local_endpoint is False
    assert settings.region == "us-east-1"
    assert settings.use_secrets_service is False
    assert settings.secrets_service_identifier == "ai-powered-secrets"


def test_cors_origins_are_split():
    settings = Settings(_env_file=None, cors_allow_origins="http://a.test, http://b.test,")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_local_endpoint_client_kwargs():
    settings = Settings(_env_file=None, use_local_endpoint=True, local_endpoint_url="http://localhost:4566")

    kwargs = client_kwargs(settings, "s3")

    assert kwargs["endpoint_url"] == "http://localhost:4566"
    assert kwargs["aws_access_key_id"] == LOCAL_ACCESS_KEY
    assert kwargs["config"].s3 == {"addressing_style": "path"}
    assert kwargs["config"].signature_version == "s3v4"


def test_production_client_kwargs_use_default_credentials():
    settings = Settings(_env_file=None, use_local_endpoint=False, region="us-west-2")

    kwargs = client_kwargs(settings, "secretsmanager")

    assert kwargs["region_name"] == "us-west-2"
    assert "endpoint_url" not in kwargs
    assert "aws_access_key_id" not in kwargs
