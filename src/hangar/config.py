from datetime import timedelta

from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = "mongodb://localhost:27017/hangar"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    debug: bool = False
    cors_origins: list[str] = []
    proxy_headers: bool = False  # Trust X-Forwarded-* when running behind a reverse proxy
    api_key_pepper: str  # HMAC key for API key hashes; rotating it invalidates every key
    # Session lifetimes as ISO 8601 durations in the environment (e.g. "P14D", "PT3H")
    key_session_expiration: timedelta = timedelta(days=14)
    public_session_expiration: timedelta = timedelta(hours=3)
    user_session_expiration: timedelta = timedelta(days=30)
    session_sweep_interval: timedelta = timedelta(minutes=10)
    max_api_keys_per_user: int = 50
    # Account created on first start so there is someone who can log in and mint keys
    default_username: str = "admin"
    default_password: str = "change-me-now"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "HANGAR_",
        "extra": "ignore",
    }
