from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PresignIn(BaseModel):
    mime: Optional[str] = None


class PresignOut(BaseModel):
    url: str
    finalName: str
