"""Process-lifetime cache of secret values.

One ``SecretStore`` is built at start-up and shared through ``app.state``.
The first read loads every secret at once: from the secrets service when
``use_secrets_service`` is on, otherwise (or when that fails) from a fixed set
of environment variables. The result stays cached until ``invalidate()``.

No lock guards the cache. Concurrent cold reads may each load; every load
publishes a complete mapping with one assignment, so readers never observe a
partial one.
"""

import os
import time
from collections.abc import Callable, Mapping
from types import MappingProxyType

import structlog

from app.core.config import Settings
from app.core.constants import FALLBACK_SECRET_NAMES
from app.core.errors import SecretsDegraded
from app.integrations.aws import create_client
from app.integrations.secrets_manager import SecretsManagerSource

logger = structlog.get_logger()

SOURCE_SECRETS_SERVICE = "secrets_service"
SOURCE_ENVIRONMENT = "environment"


class SecretStore:
    def __init__(
        self,
        settings: Settings,
        primary: SecretsManagerSource | None = None,
        environ: Mapping[str, str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.primary = primary
        self._environ = environ
        self._clock = clock
        self._cache: Mapping[str, str] | None = None
        self._source: str | None = None
        self.loaded_at: float | None = None

    @property
    def source(self) -> str | None:
        return self._source

    def get_all(self) -> Mapping[str, str]:
        cached = self._cache
        if cached is not None:
            return cached

        values, source = self._load()
        mapping = MappingProxyType(values)
        self._source = source
        self.loaded_at = self._clock()
        self._cache = mapping
        logger.info("secrets_loaded", source=source, count=len(values))
        return mapping

    def get_one(self, name: str) -> str:
        return self.get_all().get(name) or ""

    def invalidate(self) -> None:
        self._cache = None
        self._source = None
        self.loaded_at = None
        logger.info("secrets_invalidated")

    def _load(self) -> tuple[dict[str, str], str]:
        if self.settings.use_secrets_service and self.primary is not None:
            try:
                return self.primary.fetch(), SOURCE_SECRETS_SERVICE
            except SecretsDegraded as exc:
                logger.warning("secrets_degraded", code=exc.code.value, error=exc.message)
            except Exception as exc:
                logger.warning("secrets_degraded", code=SecretsDegraded.code.value, error=repr(exc))
        return self._from_environment(), SOURCE_ENVIRONMENT

    def _from_environment(self) -> dict[str, str]:
        environ = os.environ if self._environ is None else self._environ
        return {name: environ.get(name, "") for name in FALLBACK_SECRET_NAMES}


def build_secret_store(settings: Settings) -> SecretStore:
    primary = None
    if settings.use_secrets_service:
        primary = SecretsManagerSource(
            client=create_client(settings, "secretsmanager"),
            secret_id=settings.secrets_service_identifier,
        )
    return SecretStore(settings=settings, primary=primary)
