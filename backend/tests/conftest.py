import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["STORAGE_BACKEND"] = "local"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from benefit_tracker.database import Base, get_db
from benefit_tracker.dependencies import get_reference_date
from benefit_tracker.main import app
from benefit_tracker.models.benefit import Benefit
from benefit_tracker.models.card import Card
from benefit_tracker.models.minimum_spend import MinimumSpend
from benefit_tracker.storage.local_store import LocalStore

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class Clock:
    """Reference date handed to the API; tests move it forward to simulate time passing."""

    def __init__(self, today: date):
        self.today = today


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    clock = Clock(date(2024, 1, 15))
    app.dependency_overrides[get_reference_date] = lambda: clock.today
    yield clock
    app.dependency_overrides.pop(get_reference_date, None)


@pytest.fixture
def client(clock):
    return TestClient(app)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(db_session):
    return LocalStore(db_session)


def make_benefit(**kwargs) -> Benefit:
    defaults = {
        "description": "Dining credit",
        "total_amount": 10,
        "frequency": "monthly",
        "reset_type": "calendar",
        "last_reset": date(2024, 1, 15),
    }
    defaults.update(kwargs)
    return Benefit(**defaults)


def make_minimum_spend(**kwargs) -> MinimumSpend:
    defaults = {
        "description": "Spend $4,000",
        "target_amount": 4000,
        "frequency": "one-time",
        "deadline": date(2024, 4, 30),
    }
    defaults.update(kwargs)
    return MinimumSpend(**defaults)


def make_card(benefits=None, minimum_spends=None, **kwargs) -> Card:
    defaults = {"name": "Sapphire Reserve", "anniversary_date": date(2023, 3, 10)}
    defaults.update(kwargs)
    return Card(benefits=benefits or [], minimum_spends=minimum_spends or [], **defaults)
