from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductIn(BaseModel):
    # all optional so missing fields reach the presence check instead of a 422
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    filename: Optional[str] = None


class ProductCreate(BaseModel):
    name: str
    description: str
    price: float
    filename: str


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: float
    filename: str
    created_at: datetime


class Ack(BaseModel):
    success: bool
    message: str
