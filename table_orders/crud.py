from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy import case, func
from sqlmodel import Session, select

from .errors import MenuValidationError
from .lifecycle import OrderStatus
from .menu_data import DEFAULT_MENU_ITEMS
from .models import MenuItem, Order

logger = logging.getLogger(__name__)


# -------------------------
# Order operations
# -------------------------

def list_orders(session: Session, status: OrderStatus | None = None) -> List[Order]:
    statement = select(Order)
    if status is not None:
        statement = statement.where(Order.status == OrderStatus(status))
    statement = statement.order_by(Order.row_id.asc())
    return list(session.exec(statement))


def get_order(session: Session, order_id: str) -> Order | None:
    statement = select(Order).where(Order.id == order_id)
    return session.exec(statement).first()


def insert_order(session: Session, data: dict) -> Order:
    order = Order(**data)
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def update_order(session: Session, order: Order, updates: dict) -> Order:
    for key, value in updates.items():
        setattr(order, key, value)
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def compute_sales(session: Session) -> dict:
    paid = Order.status == OrderStatus.PAID
    row = session.exec(
        select(
            func.count(Order.row_id),
            func.coalesce(func.sum(case((paid, Order.total), else_=0)), 0),
            func.coalesce(func.sum(case((paid, 1), else_=0)), 0),
        )
    ).one()
    counts = count_by_status(session)
    return {
        "total_orders": int(row[0] or 0),
        "total_sales": float(row[1] or 0),
        "completed_orders": int(row[2] or 0),
        "pending_orders": counts[OrderStatus.PENDING],
        "served_orders": counts[OrderStatus.SERVED],
    }


def count_by_status(session: Session) -> dict[OrderStatus, int]:
    counts = {status: 0 for status in OrderStatus}
    statement = select(Order.status, func.count(Order.row_id)).group_by(Order.status)
    for status, count in session.exec(statement).all():
        counts[OrderStatus(status)] = int(count)
    return counts


def group_orders_by_table(session: Session) -> dict[str, List[Order]]:
    grouped: dict[str, List[Order]] = {}
    for order in list_orders(session):
        grouped.setdefault(order.table_number, []).append(order)
    return grouped


# -------------------------
# Menu operations
# -------------------------

def list_menu_items(
    session: Session,
    *,
    active_only: bool = False,
    category: str | None = None,
) -> List[MenuItem]:
    statement = select(MenuItem)
    if active_only:
        statement = statement.where(MenuItem.is_active.is_(True))
    if category:
        statement = statement.where(MenuItem.category == category)
    statement = statement.order_by(MenuItem.id.asc())
    return list(session.exec(statement))


def get_menu_item(session: Session, menu_item_id: int) -> MenuItem | None:
    return session.get(MenuItem, menu_item_id)


def create_menu_item(session: Session, data: dict, categories: Iterable[str]) -> MenuItem:
    if not (data.get("name") or "").strip() or data.get("price") is None or not data.get("category"):
        raise MenuValidationError("Please fill in all fields")
    _check_menu_fields(data, categories)
    now = datetime.now(timezone.utc)
    item = MenuItem(
        name=data["name"].strip(),
        price=data.get("price", 0),
        category=data["category"],
        options=list(data.get("options") or []),
        is_active=data.get("is_active", True),
        description=data.get("description"),
        created_at=now,
        updated_at=now,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def update_menu_item(session: Session, menu_item: MenuItem, updates: dict, categories: Iterable[str]) -> MenuItem:
    updates = {key: value for key, value in updates.items() if value is not None}
    if "name" in updates:
        if not updates["name"].strip():
            raise MenuValidationError("Please fill in all fields")
        updates["name"] = updates["name"].strip()
    _check_menu_fields(updates, categories)
    for key, value in updates.items():
        setattr(menu_item, key, value)
    menu_item.updated_at = datetime.now(timezone.utc)
    session.add(menu_item)
    session.commit()
    session.refresh(menu_item)
    return menu_item


def delete_menu_item(session: Session, menu_item: MenuItem) -> None:
    # Orders keep their own copy of name and price.
    session.delete(menu_item)
    session.commit()


def ensure_default_menu_items(session: Session) -> None:
    existing_count = session.exec(select(func.count(MenuItem.id))).one()
    if existing_count:
        return
    now = datetime.now(timezone.utc)
    for item in DEFAULT_MENU_ITEMS:
        session.add(
            MenuItem(
                name=item["name"],
                price=item["price"],
                category=item["category"],
                options=list(item.get("options", [])),
                description=item.get("description"),
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
    session.commit()


def _check_menu_fields(data: dict, categories: Iterable[str]) -> None:
    if "price" in data and (data["price"] is None or data["price"] <= 0):
        raise MenuValidationError("Please enter a valid price")
    if "category" in data and data["category"] not in set(categories):
        raise MenuValidationError("Unknown menu category")


def import_menu_items(session: Session, records: Iterable[dict], categories: Iterable[str]) -> int:
    """Add snapshot menu items missing by name and category.

    Ids come from the database; snapshot ids are ignored.
    """
    categories = list(categories)
    inserted = 0
    now = datetime.now(timezone.utc)
    for record in records:
        name = (record.get("name") or "").strip()
        try:
            if not name:
                raise MenuValidationError("Please fill in all fields")
            _check_menu_fields(record, categories)
        except MenuValidationError as exc:
            logger.warning("Skipping snapshot menu item %r: %s", name, exc)
            continue
        existing = session.exec(
            select(MenuItem).where(MenuItem.name == name, MenuItem.category == record["category"])
        ).first()
        if existing is not None:
            continue
        session.add(
            MenuItem(
                name=name,
                price=record["price"],
                category=record["category"],
                options=list(record.get("options") or []),
                created_at=now,
                updated_at=now,
            )
        )
        inserted += 1
    session.commit()
    return inserted
