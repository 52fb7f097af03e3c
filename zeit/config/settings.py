"""Client settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api.zeit.co"


class Settings(BaseSettings):
    # API access
    api_token: str = ""
    api_base_url: str = DEFAULT_BASE_URL
    team_id: str = ""  # Empty = personal account scope

    # Rate limiting
    # Share one rate-limit state per token across every client in the process
    share_rate_limits: bool = False

    # Transport
    request_timeout: float = 60.0
    connect_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "ZEIT_"}

    @property
    def team(self) -> str | None:
        """Team scope, or None when unset."""
        team = self.team_id.strip()
        return team or None


@lru_cache
def get_settings() -> Settings:
    return Settings()
