from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Float, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# base
class Base(DeclarativeBase):
    pass


# models
class ProductORM(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    # object key in the bucket; never checked unless VERIFY_UPLOADS is on
    filename: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
