from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .lifecycle import OrderStatus


class OrderLineIn(BaseModel):
    menu_item_id: int
    quantity: int = 1
    selected_option: Optional[str] = None


class OrderCreate(BaseModel):
    table_number: str = ""
    phone_number: str = ""
    items: List[OrderLineIn] = Field(default_factory=list)


class OrderLine(BaseModel):
    menu_item_id: int | str
    name: str
    price: float
    quantity: int = Field(ge=1)
    selected_option: Optional[str] = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    table_number: str
    phone_number: str
    items: List[OrderLine]
    total: float
    order_time: datetime
    status: OrderStatus
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_time: Optional[datetime] = None

    @model_validator(mode="after")
    def payment_only_when_paid(self) -> "OrderRead":
        if self.status != OrderStatus.PAID:
            self.payment_method = None
            self.payment_reference = None
            self.payment_time = None
        return self


class PaymentConfirm(BaseModel):
    reference: str = ""


class MenuOption(BaseModel):
    id: str
    name: str


class MenuItemBase(BaseModel):
    name: str
    price: float
    category: str
    options: List[str] = Field(default_factory=list)
    is_active: bool = True
    description: Optional[str] = None


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    options: Optional[List[str]] = None
    is_active: Optional[bool] = None
    description: Optional[str] = None


class MenuItemRead(MenuItemBase):
    id: int
    created_at: datetime
    updated_at: datetime


class CategoriesResponse(BaseModel):
    categories: List[MenuOption]


class SalesSummary(BaseModel):
    total_sales: float
    total_orders: int
    completed_orders: int
    pending_orders: int
    served_orders: int


class StatusCounts(BaseModel):
    pending: int
    served: int
    paid: int


class TableOrdersGroup(BaseModel):
    table_number: str
    order_count: int
    total: float
    orders: List[OrderRead]


class SnapshotImportResult(BaseModel):
    orders_imported: int
    menu_items_imported: int
