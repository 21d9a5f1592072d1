from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.orm import Session

REQUIRED_COLUMNS = {
    "users": {"id", "email", "name", "password_hash", "is_active"},
    "expenses": {"id", "user_id", "month", "item_name", "category", "amount", "money_in", "money_out"},
}


def ensure_schema(db: Session) -> None:
    # Fail fast if database schema is behind code.
    inspector = inspect(db.get_bind())
    for table, required in REQUIRED_COLUMNS.items():
        if not inspector.has_table(table):
            raise RuntimeError(f"Database table '{table}' is missing. Run: alembic upgrade head")
        cols = {c.get("name") for c in inspector.get_columns(table)}
        missing = sorted(required - cols)
        if missing:
            raise RuntimeError(
                f"Database schema is outdated (missing {table}.{', '.join(missing)}). "
                "Run: alembic upgrade head"
            )
