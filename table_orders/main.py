from __future__ import annotations

import csv
import io
import logging
from typing import Annotated, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from . import crud, schemas, snapshot
from .cart import Cart
from .config import get_settings
from .database import engine, get_session, init_db
from .errors import MenuValidationError, OrderNotFoundError, OrderValidationError
from .lifecycle import OrderStatus
from .menu_data import MENU_CATEGORIES
from .store import OrderStore
from .validation import validate_submission

logger = logging.getLogger(__name__)

app = FastAPI(title="Table Orders", version="0.1.0")
settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

order_store = OrderStore(engine)


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    if settings.seed_default_menu:
        with Session(engine) as session:
            crud.ensure_default_menu_items(session)


def get_store() -> OrderStore:
    return order_store


def verify_access_key(
    x_access_key: Annotated[str | None, Header(alias="X-Access-Key")] = None
) -> None:
    if settings.access_key and x_access_key != settings.access_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access key",
        )


AccessGuard = Annotated[None, Depends(verify_access_key)]
Store = Annotated[OrderStore, Depends(get_store)]


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


# -------------------------
# Menu
# -------------------------

@app.get("/meta/categories", response_model=schemas.CategoriesResponse)
def get_categories(_: AccessGuard):
    known = {category["id"]: category["name"] for category in MENU_CATEGORIES}
    return schemas.CategoriesResponse(
        categories=[
            schemas.MenuOption(id=category_id, name=known.get(category_id, category_id.replace("-", " ").title()))
            for category_id in settings.menu_categories
        ]
    )


@app.get("/menu-items", response_model=List[schemas.MenuItemRead])
def list_menu_items(
    active_only: bool = False,
    category: Optional[str] = None,
    _: AccessGuard = None,
    session: Session = Depends(get_session),
):
    return crud.list_menu_items(session, active_only=active_only, category=category)


@app.post("/menu-items", response_model=schemas.MenuItemRead, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    payload: schemas.MenuItemCreate,
    _: AccessGuard = None,
    session: Session = Depends(get_session),
):
    data = payload.model_dump(exclude_unset=True)
    try:
        return crud.create_menu_item(session, data, settings.menu_categories)
    except MenuValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.put("/menu-items/{menu_item_id}", response_model=schemas.MenuItemRead)
def update_menu_item(
    menu_item_id: int,
    payload: schemas.MenuItemUpdate,
    _: AccessGuard = None,
    session: Session = Depends(get_session),
):
    menu_item = crud.get_menu_item(session, menu_item_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    data = payload.model_dump(exclude_unset=True)
    try:
        return crud.update_menu_item(session, menu_item, data, settings.menu_categories)
    except MenuValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.delete("/menu-items/{menu_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    menu_item_id: int,
    _: AccessGuard = None,
    session: Session = Depends(get_session),
):
    menu_item = crud.get_menu_item(session, menu_item_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    crud.delete_menu_item(session, menu_item)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------------------------
# Orders
# -------------------------

@app.get("/orders", response_model=List[schemas.OrderRead])
def list_orders(
    _: AccessGuard,
    store: Store,
    order_status: Annotated[Optional[OrderStatus], Query(alias="status")] = None,
):
    if order_status is None:
        return store.list_orders()
    return store.list_by_status(order_status)


@app.post("/orders", response_model=schemas.OrderRead, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: schemas.OrderCreate,
    _: AccessGuard,
    store: Store,
    session: Session = Depends(get_session),
):
    cart = Cart()
    try:
        validate_submission(
            payload.table_number,
            payload.phone_number,
            [line.model_dump() for line in payload.items],
            require_price=False,
        )
        for line in payload.items:
            menu_item = _resolve_menu_item(session, line.menu_item_id)
            cart.add(menu_item, line.selected_option, quantity=line.quantity)
        return store.create_order(payload.table_number, payload.phone_number, cart.as_order_items())
    except OrderValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@app.get("/orders/export", response_class=PlainTextResponse)
def export_orders(_: AccessGuard, store: Store):
    orders = store.list_orders()
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([
        "id",
        "table_number",
        "phone_number",
        "items",
        "total",
        "order_time",
        "status",
        "payment_reference",
        "payment_time",
    ])
    for order in orders:
        writer.writerow([
            order.id,
            order.table_number,
            order.phone_number,
            "; ".join(_format_line(line) for line in order.items),
            order.total,
            order.order_time.isoformat() if order.order_time else "",
            OrderStatus(order.status).value,
            order.payment_reference or "",
            order.payment_time.isoformat() if order.payment_time else "",
        ])
    csv_content = buffer.getvalue()
    headers = {
        "Content-Disposition": "attachment; filename=orders.csv",
    }
    return PlainTextResponse(content=csv_content, media_type="text/csv", headers=headers)


@app.get("/orders/{order_id}", response_model=schemas.OrderRead)
def get_order(order_id: str, _: AccessGuard, store: Store):
    try:
        return store.get_order(order_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc


@app.post("/orders/{order_id}/serve", response_model=schemas.OrderRead)
def serve_order(order_id: str, _: AccessGuard, store: Store):
    try:
        return store.mark_served(order_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc


@app.post("/orders/{order_id}/pay", response_model=schemas.OrderRead)
def pay_order(
    order_id: str,
    _: AccessGuard,
    store: Store,
    payload: Optional[schemas.PaymentConfirm] = None,
):
    reference = payload.reference if payload else ""
    try:
        return store.mark_paid(order_id, reference)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc


# -------------------------
# Reports
# -------------------------

@app.get("/reports/sales", response_model=schemas.SalesSummary)
def sales_summary(_: AccessGuard, store: Store):
    return schemas.SalesSummary(**store.aggregate_sales())


@app.get("/reports/status-counts", response_model=schemas.StatusCounts)
def status_counts(_: AccessGuard, store: Store):
    counts = store.status_counts()
    return schemas.StatusCounts(**{order_status.value: count for order_status, count in counts.items()})


@app.get("/reports/tables", response_model=List[schemas.TableOrdersGroup])
def table_orders(_: AccessGuard, store: Store):
    return [
        schemas.TableOrdersGroup(
            table_number=table_number,
            order_count=len(orders),
            total=sum(order.total for order in orders),
            orders=[schemas.OrderRead.model_validate(order) for order in orders],
        )
        for table_number, orders in store.group_by_table().items()
    ]


# -------------------------
# Snapshots
# -------------------------

@app.get("/admin/snapshot")
def export_snapshot(
    _: AccessGuard,
    store: Store,
    session: Session = Depends(get_session),
) -> dict:
    return snapshot.dump_snapshot(store.list_orders(), crud.list_menu_items(session))


@app.post("/admin/snapshot", response_model=schemas.SnapshotImportResult)
async def import_snapshot(
    request: Request,
    _: AccessGuard,
    store: Store,
    session: Session = Depends(get_session),
):
    # Read the raw body so a malformed blob imports as empty instead of a 422.
    data = snapshot.parse_blob(await request.body())
    order_records = [record.to_order_data() for record in snapshot.read_orders(data)]
    menu_records = [record.model_dump() for record in snapshot.read_menu_items(data)]
    orders = await run_in_threadpool(store.import_orders, order_records)
    menu_items = await run_in_threadpool(crud.import_menu_items, session, menu_records, settings.menu_categories)
    logger.info("Snapshot imported: %d orders, %d menu items", orders, menu_items)
    return schemas.SnapshotImportResult(orders_imported=orders, menu_items_imported=menu_items)


def _resolve_menu_item(session: Session, menu_item_id: int):
    menu_item = crud.get_menu_item(session, menu_item_id)
    if not menu_item or not menu_item.is_active:
        raise OrderValidationError("Invalid menu item")
    return menu_item


def _format_line(line: dict) -> str:
    label = line["name"]
    if line.get("selected_option"):
        label = f"{label} ({line['selected_option']})"
    return f"{label} x{line['quantity']}"
