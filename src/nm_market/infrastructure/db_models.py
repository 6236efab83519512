# src/nm_market/infrastructure/db_models.py
"""SQLAlchemy ORM models for the marketplace tables (DDL reference only — queries use raw SQL)."""
from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, Boolean, DateTime, Numeric, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.nm_common.database import Base


class SaleOrderORM(Base):
    __tablename__ = "sale_orders"

    order_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    asset_address: Mapped[str] = mapped_column(String(128), nullable=False)
    asset_id: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    seller: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    buyer: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class OrderHistoryORM(Base):
    __tablename__ = "order_history"

    item_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    asset_address: Mapped[str] = mapped_column(String(128), nullable=False)
    asset_id: Mapped[int] = mapped_column(Numeric(78, 0), nullable=False)
    seller: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="OPEN")
    buyer: Mapped[str | None] = mapped_column(String(64), nullable=True)
    amount_paid: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class MarketEventORM(Base):
    __tablename__ = "marketplace_events"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
