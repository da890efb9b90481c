"""Order store shared by the customer, staff and admin surfaces.

Each public method runs under one process-wide lock and touches a single
order row inside its own session, so concurrent staff actions on the same
order are serialised instead of overwriting one another.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Iterable, List, Mapping

from sqlalchemy.engine import Engine
from sqlmodel import Session

from . import crud
from .errors import OrderNotFoundError
from .lifecycle import INITIAL_STATUS, OrderStatus, advance
from .models import Order
from .validation import order_total, validate_submission

logger = logging.getLogger(__name__)

PAYMENT_METHOD = "mobile-money"
NO_REFERENCE = "N/A"


class OrderStore:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._lock = threading.Lock()

    def _session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    # -------------------------
    # Writes
    # -------------------------

    def create_order(self, table_number: str, phone_number: str, items: Iterable[Mapping]) -> Order:
        items = [dict(item) for item in items or []]
        validate_submission(table_number, phone_number, items)
        for item in items:
            item["quantity"] = int(item["quantity"])
        data = {
            "table_number": table_number.strip(),
            "phone_number": phone_number.strip(),
            "items": items,
            "total": order_total(items),
            "order_time": datetime.now(timezone.utc),
            "status": INITIAL_STATUS,
        }
        with self._lock, self._session() as session:
            order = crud.insert_order(session, data)
        logger.info("Order %s created for table %s (total %.2f)", order.id, order.table_number, order.total)
        return order

    def mark_served(self, order_id: str) -> Order:
        with self._lock, self._session() as session:
            order = self._require(session, order_id)
            if order.status != OrderStatus.PENDING:
                return order
            order = crud.update_order(session, order, {"status": OrderStatus.SERVED})
        logger.info("Order %s served", order_id)
        return order

    def mark_paid(self, order_id: str, reference: str | None = None) -> Order:
        with self._lock, self._session() as session:
            order = self._require(session, order_id)
            if advance(order.status, OrderStatus.PAID) == order.status:
                return order
            updates = {
                "status": OrderStatus.PAID,
                "payment_method": PAYMENT_METHOD,
                "payment_reference": (reference or "").strip() or NO_REFERENCE,
                "payment_time": datetime.now(timezone.utc),
            }
            if order.status == OrderStatus.PENDING:
                logger.warning("Order %s paid before being marked served", order_id)
            order = crud.update_order(session, order, updates)
        logger.info("Order %s paid, reference %s", order_id, order.payment_reference)
        return order

    def import_orders(self, records: Iterable[Mapping]) -> int:
        """Insert snapshot records whose ids are not already stored."""
        inserted = 0
        with self._lock, self._session() as session:
            for record in records:
                if crud.get_order(session, record["id"]) is not None:
                    continue
                crud.insert_order(session, dict(record))
                inserted += 1
        logger.info("Imported %d orders", inserted)
        return inserted

    # -------------------------
    # Reads
    # -------------------------

    def get_order(self, order_id: str) -> Order:
        with self._lock, self._session() as session:
            return self._require(session, order_id)

    def list_orders(self) -> List[Order]:
        with self._lock, self._session() as session:
            return crud.list_orders(session)

    def list_by_status(self, status: OrderStatus) -> List[Order]:
        with self._lock, self._session() as session:
            return crud.list_orders(session, OrderStatus(status))

    def group_by_table(self) -> dict[str, List[Order]]:
        with self._lock, self._session() as session:
            return crud.group_orders_by_table(session)

    def aggregate_sales(self) -> dict:
        with self._lock, self._session() as session:
            return crud.compute_sales(session)

    def status_counts(self) -> dict[OrderStatus, int]:
        with self._lock, self._session() as session:
            return crud.count_by_status(session)

    @staticmethod
    def _require(session: Session, order_id: str) -> Order:
        order = crud.get_order(session, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
