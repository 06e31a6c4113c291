import json
from json import JSONDecodeError

from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from app.core.errors import SecretsDegraded


class SecretsManagerSource:
    """Reads one JSON secret from AWS Secrets Manager (or the local emulator)."""

    name = "secrets_service"

    def __init__(self, client: BaseClient, secret_id: str) -> None:
        self.client = client
        self.secret_id = secret_id

    def fetch(self) -> dict[str, str]:
        try:
            result = self.client.get_secret_value(SecretId=self.secret_id)
        except (ClientError, BotoCoreError) as exc:
            raise SecretsDegraded(f"could not read secret {self.secret_id}: {exc}") from exc

        try:
            payload = json.loads(result.get("SecretString") or "{}")
        except JSONDecodeError as exc:
            raise SecretsDegraded(f"secret {self.secret_id} is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise SecretsDegraded(f"secret {self.secret_id} is not a JSON object")
        return {str(name): "" if value is None else str(value) for name, value in payload.items()}
