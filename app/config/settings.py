from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; all caller-scoped access goes through it
    supabase_service_role_key: Optional[str] = None  # Required for system-context operations (bypasses RLS)

    # Direct Postgres connection, used only to run the setup statements
    database_url: Optional[str] = None

    # Auth
    site_url: str = "http://localhost:3000"  # Base for verification/reset links in auth emails
    access_cookie_name: str = "access_token"
    refresh_cookie_name: str = "refresh_token"
    setup_secret: str = "development-only"  # Expected X-Setup-Secret header on the bootstrap endpoint

    # App
    app_name: str = "starter-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
