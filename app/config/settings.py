from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Store backend runs with this key; policies are enforced in app.core.access

    # Relational store
    store_backend: str = "supabase"  # supabase | sqlite
    sqlite_path: str = "data/trip_store.sqlite3"

    # App
    app_name: str = "itinerary-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "*"
    cors_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_headers: str = "Content-Type,Authorization,X-Client-Info,Apikey"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    suggestion_limit: int = 5

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @staticmethod
    def _split(raw: str) -> List[str]:
        return [item.strip() for item in raw.split(",") if item.strip()]

    def get_cors_origins_list(self) -> List[str]:
        return self._split(self.cors_origins)

    def get_cors_methods_list(self) -> List[str]:
        return self._split(self.cors_methods)

    def get_cors_headers_list(self) -> List[str]:
        return self._split(self.cors_headers)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
