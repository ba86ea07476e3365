from datetime import datetime, timezone

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401  Registers tables on SQLModel.metadata
from models.perimeter import Perimeter
from models.user import SessionContext, UserRole

# Fixed "now": 14:00 UTC is 10:00 in America/New_York, safely mid-day
NOW = datetime(2026, 10, 19, 14, 0, tzinfo=timezone.utc)

# Inside the Office perimeter
OFFICE_POINT = (51.51, -0.13)
# ~55 km north of the Office perimeter
FAR_POINT = (52.0, -0.13)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def office(session):
    perimeter = Perimeter(name="Office", center_lat=51.5074, center_lng=-0.1278, radius_km=2)
    session.add(perimeter)
    session.commit()
    session.refresh(perimeter)
    return perimeter


@pytest.fixture
def worker():
    return SessionContext(
        uid="worker-1",
        email="ada@example.com",
        display_name="Ada Lovelace",
        role=UserRole.WORKER,
    )


@pytest.fixture
def other_worker():
    return SessionContext(
        uid="worker-2",
        email="grace@example.com",
        display_name="Grace Hopper",
        role=UserRole.WORKER,
    )


@pytest.fixture
def manager():
    return SessionContext(
        uid="manager-1",
        email="boss@example.com",
        display_name="Morgan Manager",
        role=UserRole.MANAGER,
    )
