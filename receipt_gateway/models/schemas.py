from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class ReceiptIn(BaseModel):
    shopName: Optional[str] = None
    date: Optional[datetime] = None
    items: List[str] = Field(default_factory=list)
    total: Optional[float] = None


class ReceiptPatch(BaseModel):
    shopName: Optional[str] = None
    date: Optional[datetime] = None
    items: Optional[List[str]] = None
    total: Optional[float] = None


class Receipt(ReceiptIn):
    id: str
    createdAt: Optional[datetime] = None


class OCRText(BaseModel):
    text: str
    raw: Any = None


class OCRResponse(BaseModel):
    ok: bool = True
    data: OCRText
