"""JSON blob export/import in the browser-storage layout.

A snapshot is ``{"orders": [...], "menuItems": [...]}`` with camelCase order
records. Reading never raises: a missing or unparsable blob reads as empty
and bad records are skipped.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .lifecycle import OrderStatus
from .models import MenuItem, Order

logger = logging.getLogger(__name__)

ORDERS_KEY = "orders"
MENU_ITEMS_KEY = "menuItems"


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderLineRecord(_Record):
    id: int | str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    selected_option: Optional[str] = None


class OrderRecord(_Record):
    id: str
    table_number: str
    phone_number: str
    items: List[OrderLineRecord]
    total: float
    order_time: datetime
    status: OrderStatus = OrderStatus.PENDING
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_time: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderRecord":
        return cls(
            id=order.id,
            table_number=order.table_number,
            phone_number=order.phone_number,
            items=[
                OrderLineRecord(
                    id=line["menu_item_id"],
                    name=line["name"],
                    price=line["price"],
                    quantity=line["quantity"],
                    selected_option=line.get("selected_option"),
                )
                for line in order.items
            ],
            total=order.total,
            order_time=order.order_time,
            status=order.status,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            payment_time=order.payment_time,
        )

    def to_order_data(self) -> dict:
        return {
            "id": self.id,
            "table_number": self.table_number,
            "phone_number": self.phone_number,
            "items": [
                {
                    "menu_item_id": line.id,
                    "name": line.name,
                    "price": line.price,
                    "quantity": line.quantity,
                    "selected_option": line.selected_option,
                }
                for line in self.items
            ],
            "total": self.total,
            "order_time": self.order_time,
            "status": self.status,
            "payment_method": self.payment_method,
            "payment_reference": self.payment_reference,
            "payment_time": self.payment_time,
        }


class MenuItemRecord(_Record):
    id: Optional[int] = None
    name: str
    price: float
    category: str
    options: List[str] = Field(default_factory=list)


def dump_snapshot(orders: List[Order], menu_items: List[MenuItem]) -> dict:
    return {
        ORDERS_KEY: [OrderRecord.from_order(order).model_dump(mode="json", by_alias=True) for order in orders],
        MENU_ITEMS_KEY: [
            MenuItemRecord(
                id=item.id,
                name=item.name,
                price=item.price,
                category=item.category,
                options=list(item.options or []),
            ).model_dump(mode="json", by_alias=True)
            for item in menu_items
        ],
    }


def parse_blob(raw: str | bytes | None) -> Any:
    """Decode a stored blob, returning ``None`` when absent or unparsable."""
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed snapshot blob: %s", exc)
        return None


def read_orders(blob: Any) -> List[OrderRecord]:
    return _read_collection(blob, ORDERS_KEY, OrderRecord)


def read_menu_items(blob: Any) -> List[MenuItemRecord]:
    return _read_collection(blob, MENU_ITEMS_KEY, MenuItemRecord)


def _read_collection(blob: Any, key: str, model: type[_Record]) -> list:
    if isinstance(blob, (str, bytes)):
        blob = parse_blob(blob)
    if isinstance(blob, dict):
        blob = blob.get(key)
    if blob is None:
        return []
    if not isinstance(blob, list):
        logger.warning("Snapshot %s is not a list; treating it as empty", key)
        return []

    records = []
    for index, raw in enumerate(blob):
        try:
            records.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s record %d: %s", key, index, exc.error_count())
    return records
