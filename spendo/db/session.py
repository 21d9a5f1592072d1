from __future__ import annotations

from sqlalchemy import URL, create_engine
from sqlalchemy.orm import sessionmaker

from spendo.core.config import settings


def _odbc_attributes() -> dict[str, str]:
    attrs = {
        "DRIVER": f"{{{settings.db_driver}}}",
        # .env files often double the backslash in .\SQLEXPRESS
        "SERVER": settings.db_server.replace("\\\\", "\\"),
        "DATABASE": settings.db_name,
        "TrustServerCertificate": "yes",
    }
    if settings.db_trusted_connection:
        attrs["Trusted_Connection"] = "yes"
        return attrs

    if not settings.db_user or not settings.db_password:
        raise ValueError("SQL login requires SPENDO_DB_USER and SPENDO_DB_PASSWORD")
    attrs["UID"] = settings.db_user
    attrs["PWD"] = settings.db_password
    return attrs


def build_connection_url() -> str:
    """SPENDO_DATABASE_URL when set, else a SQL Server URL passing a raw ODBC string."""

    if settings.database_url:
        return settings.database_url

    odbc = ";".join(f"{key}={value}" for key, value in _odbc_attributes().items())
    url = URL.create("mssql+pyodbc", query={"odbc_connect": odbc})
    return url.render_as_string(hide_password=False)


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


_url = build_connection_url()

engine = create_engine(
    _url,
    connect_args=_connect_args(_url),
    pool_pre_ping=True,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
