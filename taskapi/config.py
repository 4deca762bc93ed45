import os
from dataclasses import dataclass

VERSION = "2.0.0"

DEFAULT_SECRET_KEY = "dev-secret-key"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Default to local SQLite for dev/tests; override via env in Docker/Prod
    database_url: str = "sqlite:///./taskapi.db"
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: float = 24 * 60
    host: str = "0.0.0.0"
    port: int = 8080
    mode: str = "debug"
    pool_size: int = 5
    db_echo: bool = False

    @property
    def is_release(self) -> bool:
        return self.mode == "release"


def load_settings() -> Settings:
    """Build settings from the environment, falling back to local-dev defaults."""
    return Settings(
        database_url=os.environ.get("DATABASE_URL", Settings.database_url),
        secret_key=os.environ.get("SECRET_KEY", DEFAULT_SECRET_KEY),
        algorithm=os.environ.get("ALGORITHM", Settings.algorithm),
        access_token_expire_minutes=float(
            os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", Settings.access_token_expire_minutes)
        ),
        host=os.environ.get("HOST", Settings.host),
        port=int(os.environ.get("PORT", Settings.port)),
        mode=os.environ.get("APP_MODE", Settings.mode).lower(),
        pool_size=int(os.environ.get("DB_POOL_SIZE", Settings.pool_size)),
        db_echo=_env_bool("DB_ECHO", Settings.db_echo),
    )
