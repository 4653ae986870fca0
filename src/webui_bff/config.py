"""
Process configuration for the web UI backend-for-frontend.

These values are read once from the environment (and a project-root
``.env`` file) at startup. Runtime tunables such as the upstream URL,
timeout and retry count live in the parameter store instead and are
resolved per request by ``RuntimeConfig``.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Identity: also the parameter store namespace
    SERVICE_NAME: str = 'astro-webui'

    # Parameter store
    AWS_REGION: str = 'eu-west-1'
    AWS_SSM_ENDPOINT: str | None = None
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    PARAMETER_STORE_TIMEOUT_SECONDS: float = 2.0

    # Logging
    LOG_LEVEL: str = 'info'
    LOG_JSON: bool = False

    # Upstream
    UPSTREAM_GREETINGS_PATH: str = '/api/v1/greetings'

    @property
    def parameter_store_enabled(self) -> bool:
        return bool(self.AWS_SSM_ENDPOINT)


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
