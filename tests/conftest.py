import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.database import get_session
from app.logger_config import logger
from app.main import app as fastapi_app
from app.models.debt import Debt
from app.models.user import User
from app.utils.category_helpers import create_base_categories

OWNER_ID = 1
OTHER_OWNER_ID = 2


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def owners(session):
    session.add(User(id=OWNER_ID, email="user@budgetmanager.local"))
    session.add(User(id=OTHER_OWNER_ID, email="other@budgetmanager.local"))
    session.commit()
    # Solo el primer usuario tiene las categorías espejo
    create_base_categories(OWNER_ID, session)
    return OWNER_ID, OTHER_OWNER_ID


@pytest.fixture
def car_loan(session, owners) -> Debt:
    debt = Debt(user_id=OWNER_ID, name="Car Loan", amount=10_000_000)
    session.add(debt)
    session.commit()
    session.refresh(debt)
    return debt


@pytest.fixture
def foreign_debt(session, owners) -> Debt:
    debt = Debt(user_id=OTHER_OWNER_ID, name="Someone else's loan", amount=1_000_000)
    session.add(debt)
    session.commit()
    session.refresh(debt)
    return debt


@pytest.fixture
def client(session, owners):
    fastapi_app.dependency_overrides[get_session] = lambda: session
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def ledger_logs(caplog, monkeypatch):
    monkeypatch.setattr(logger, "propagate", True)
    caplog.set_level(logging.WARNING, logger=logger.name)
    return caplog
