from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from .lifecycle import OrderStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MenuItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    price: float = Field(default=0, ge=0)
    category: str = Field(index=True)
    options: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=True, index=True)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Order(SQLModel, table=True):
    # row_id only preserves insertion order; id is the public key.
    row_id: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=lambda: uuid4().hex, index=True, sa_column_kwargs={"unique": True})
    table_number: str = Field(index=True)
    phone_number: str
    items: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    total: float = Field(default=0, ge=0)
    order_time: datetime = Field(default_factory=_utcnow, index=True)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_time: Optional[datetime] = None


__all__ = ["Order", "MenuItem"]
