from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from pydantic import field_validator

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./donor_registry.db"

    # Donation policy
    DONATION_COOLDOWN_DAYS: int = 90

    # Application
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    APP_NAME: str = "Syed Samaj Palanpur Blood Group Data"
    APP_VERSION: str = "1.0.0"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173,http://127.0.0.1:3000"
    STATIC_DIRECTORY: str = "public"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    PORT_FALLBACK_ATTEMPTS: int = 10
    WORKERS: int = 4

    # Listing
    LIST_DEFAULT_LIMIT: int = 100
    LIST_MAX_LIMIT: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
    LOG_FILE: str = "logs/donor_registry.log"

    # Database Connection Pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    @field_validator('DEBUG', mode='before')
    @classmethod
    def parse_bool(cls, v):
        """Parse boolean from string."""
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes")
        return bool(v)

    @field_validator('DONATION_COOLDOWN_DAYS')
    @classmethod
    def check_cooldown(cls, v):
        if v < 0:
            raise ValueError("DONATION_COOLDOWN_DAYS must be non-negative")
        return v

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Convert comma-separated strings to lists after initialization
        self._cors_origins_list = [item.strip() for item in self.CORS_ORIGINS.split(',') if item.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS_ORIGINS as a list."""
        return self._cors_origins_list

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

settings = Settings()
