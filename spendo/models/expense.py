from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from spendo.core.extraction import CATEGORY_MAX_LENGTH, ITEM_NAME_MAX_LENGTH, NOTES_MAX_LENGTH
from spendo.models.base import Base


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expenses_user_month", "user_id", "month"),
        Index("ix_expenses_user_category", "user_id", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)

    # Canonical YYYY-MM key; sorts chronologically as a string.
    month: Mapped[str] = mapped_column(String(7))

    item_name: Mapped[str] = mapped_column(String(ITEM_NAME_MAX_LENGTH), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=False, default="")

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    money_in: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    money_out: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    notes: Mapped[str | None] = mapped_column(String(NOTES_MAX_LENGTH), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
