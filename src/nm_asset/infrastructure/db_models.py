"""SQLAlchemy ORM model for the assets table (DDL reference only — queries use raw SQL)."""
from datetime import datetime

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.nm_common.database import Base


class AssetORM(Base):
    __tablename__ = "assets"

    asset_address: Mapped[str] = mapped_column(String(128), primary_key=True)
    asset_id: Mapped[int] = mapped_column(Numeric(78, 0), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    approved_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
