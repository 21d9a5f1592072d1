from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SPENDO_", env_file=".env", extra="ignore")

    # Full SQLAlchemy URL (e.g. sqlite:///./spendo.db). When empty, an ODBC
    # SQL Server URL is built from the db_* fields below.
    database_url: str | None = None

    db_server: str = r".\SQLEXPRESS"
    db_name: str = "Spendo"
    db_trusted_connection: bool = True
    db_user: str | None = None
    db_password: str | None = None
    db_driver: str = "ODBC Driver 17 for SQL Server"

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "spendo"
    jwt_expire_minutes: int = 60 * 24 * 7

    # The mobile client sends a bearer token; browsers fall back to this cookie.
    auth_cookie_name: str = "spendo_auth"
    auth_cookie_samesite: str = "lax"  # lax|strict|none
    auth_cookie_secure: bool = False

    cors_origins: str = "http://localhost:8081,http://127.0.0.1:8081,http://localhost:19006"

    log_level: str = "INFO"

    chart_default_limit: int = 12
    upload_max_rows: int = 5000


settings = Settings()
