import os

# Default to in-memory SQLite for tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEFAULT_MENU", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from table_orders import crud
from table_orders import main as app_main
from table_orders.database import get_session, init_db
from table_orders.store import OrderStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> OrderStore:
    return OrderStore(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded_menu(session):
    crud.ensure_default_menu_items(session)
    return {item.name: item for item in crud.list_menu_items(session)}


@pytest.fixture
def client(engine, store, seeded_menu):
    def _session():
        with Session(engine) as session:
            yield session

    app_main.app.dependency_overrides[get_session] = _session
    app_main.app.dependency_overrides[app_main.get_store] = lambda: store
    yield TestClient(app_main.app)
    app_main.app.dependency_overrides.clear()


def line(price, quantity=1, name="Item", menu_item_id=1, option=None) -> dict:
    return {
        "menu_item_id": menu_item_id,
        "name": name,
        "price": price,
        "quantity": quantity,
        "selected_option": option,
    }
