"""Application settings loaded from environment variables and .env files."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = "sqlite+aiosqlite:///./data/musichub.db"
    echo: bool = False


class ObservabilitySettings(BaseModel):
    """Logging output settings."""

    log_json_format: bool = False


# Hey future me - one block per OAuth service! The interactive half of the flow (browser,
# redirect capture) lives OUTSIDE this package in the IOAuthFlow collaborator. These values
# are just handed over to it. An empty client_id means "not configured" - for YouTube that
# disables the fallback policy completely (anonymous default provider only).
class OAuthServiceSettings(BaseModel):
    """OAuth endpoints and app credentials for one streaming/cloud service."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8765/oauth/callback"
    authorize_url: str = ""
    token_url: str = ""
    api_base_url: str = ""
    scopes: list[str] = Field(default_factory=list)

    def is_configured(self) -> bool:
        """Check if an app client id is present."""
        return bool(self.client_id and self.client_id.strip())


class TunezSettings(BaseModel):
    """Local-network Tunez server settings."""

    catalog_cache_name: str = "tunezprovider.catalog"
    default_address: str = "http://test.com:51986"


class Settings(BaseSettings):
    """Root settings object.

    Nested values can be set with a double underscore, e.g.
    ``MUSICHUB_DATABASE__URL`` or ``MUSICHUB_YOUTUBE__CLIENT_ID``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MUSICHUB_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "musichub"
    app_env: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"
    lib_dir: Path = Path("./data/lib")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    tunez: TunezSettings = Field(default_factory=TunezSettings)

    google: OAuthServiceSettings = Field(
        default_factory=lambda: OAuthServiceSettings(
            authorize_url="https://accounts.google.com/o/oauth2/auth",
            token_url="https://accounts.google.com/o/oauth2/token",
            api_base_url="https://www.googleapis.com/sj/v2.5/",
            scopes=["https://www.googleapis.com/auth/skyjam"],
        )
    )
    youtube: OAuthServiceSettings = Field(
        default_factory=lambda: OAuthServiceSettings(
            authorize_url="https://accounts.google.com/o/oauth2/auth",
            token_url="https://accounts.google.com/o/oauth2/token",
            api_base_url="https://www.googleapis.com/youtube/v3/",
            scopes=["https://www.googleapis.com/auth/youtube.readonly"],
        )
    )
    soundcloud: OAuthServiceSettings = Field(
        default_factory=lambda: OAuthServiceSettings(
            authorize_url="https://soundcloud.com/connect",
            token_url="https://api.soundcloud.com/oauth2/token",
            api_base_url="https://api.soundcloud.com/",
            scopes=["non-expiring"],
        )
    )
    amazon: OAuthServiceSettings = Field(
        default_factory=lambda: OAuthServiceSettings(
            authorize_url="https://www.amazon.com/ap/oa",
            token_url="https://api.amazon.com/auth/o2/token",
            api_base_url="https://drive.amazonaws.com/drive/v1/",
            scopes=["clouddrive:read_all"],
        )
    )
    onedrive: OAuthServiceSettings = Field(
        default_factory=lambda: OAuthServiceSettings(
            authorize_url="https://login.live.com/oauth20_authorize.srf",
            token_url="https://login.live.com/oauth20_token.srf",
            api_base_url="https://api.onedrive.com/v1.0/",
            scopes=["onedrive.readonly", "wl.offline_access"],
        )
    )

    @property
    def catalog_cache_path(self) -> Path:
        """Path of the on-disk Tunez catalog snapshot."""
        return self.lib_dir / self.tunez.catalog_cache_name

    def ensure_directories(self) -> None:
        """Create storage directories if they don't exist."""
        self.lib_dir.mkdir(parents=True, exist_ok=True)

    def _get_sqlite_db_path(self) -> Path | None:
        """Return the SQLite file path, or None for in-memory/non-SQLite URLs."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, raw_path = url.partition(":///")
        if not raw_path or raw_path == ":memory:":
            return None
        return Path(raw_path)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
