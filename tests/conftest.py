"""Shared fixtures: in-memory stores for the core, an in-memory SQLite app for the API."""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from barbershop.core.lifecycle import AppointmentManager
from barbershop.db import get_session, init_db
from barbershop.models import Account, Shop
from barbershop.stores import (
    InMemoryAccountDirectory,
    InMemoryAppointmentStore,
    InMemoryShopDirectory,
)

from tests.helpers import NOW


@pytest.fixture
def shop():
    """Open Mondays 09:00-11:00, staffed by A (owner) and B."""
    return Shop(
        id="S1",
        name="Elegant Cuts",
        owner_id="A",
        working_days=[0],
        opening_time="09:00",
        closing_time="11:00",
        staff_ids=["A", "B"],
    )


@pytest.fixture
def accounts():
    return InMemoryAccountDirectory(
        [
            Account(id="A", email="ana@example.com", name="Ana", role="barber"),
            Account(id="B", email="beto@example.com", name="Beto", role="barber"),
            Account(id="C1", email="carla@example.com", name="Carla", role="client"),
            Account(id="C2", email="diego@example.com", name="Diego", role="client"),
        ]
    )


@pytest.fixture
def shops(shop):
    return InMemoryShopDirectory([shop])


@pytest.fixture
def store():
    return InMemoryAppointmentStore()


@pytest.fixture
def manager(store, shops, accounts):
    counter = itertools.count(1)
    return AppointmentManager(
        appointments=store,
        shops=shops,
        accounts=accounts,
        clock=lambda: NOW,
        id_factory=lambda: f"APT-{next(counter):08d}",
    )


# =========================================================================
# API fixtures
# =========================================================================

@pytest.fixture
def engine():
    """In-memory SQLite shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    from barbershop.main import app

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Create an account, log in, and return (account_id, auth headers)."""

    def _register(email: str, role: str, name: str = "Test User", password: str = "secret-pass"):
        resp = client.post(
            "/users",
            json={"email": email, "name": name, "password": password, "role": role},
        )
        assert resp.status_code == 201, resp.text
        token = client.post(
            "/auth/login", data={"username": email, "password": password}
        ).json()["access_token"]
        return resp.json()["id"], {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def barber(register):
    return register("ana@example.com", "barber", name="Ana")


@pytest.fixture
def customer(register):
    return register("carla@example.com", "client", name="Carla")


@pytest.fixture
def shop_id(client, barber):
    """A shop owned by ``barber``, open Mondays 09:00-11:00."""
    _, headers = barber
    resp = client.post(
        "/shops",
        json={
            "name": "Elegant Cuts",
            "working_days": ["Lunes"],
            "opening_time": "09:00",
            "closing_time": "11:00",
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]
