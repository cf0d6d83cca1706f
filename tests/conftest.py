import os
from types import SimpleNamespace
from typing import Dict

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from busbooking.auth.utils import create_access_token, get_password_hash
from busbooking.database import Base, get_db, init_db
from busbooking.main import app
from busbooking.models import City, Company, Role, Station, TransportType, User, UserHasRole


@pytest.fixture()
def engine():
    """
    One in-memory SQLite database per test, shared by every session through StaticPool.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def seed(db) -> SimpleNamespace:
    """
    Reference data most tests need: three cities, a company, a transport type,
    one station in Damascus and one in Aleppo, and the roles.
    """
    damascus = City(name="Damascus")
    aleppo = City(name="Aleppo")
    homs = City(name="Homs")
    company = Company(name="Al-Qadmous Transport")
    bus = TransportType(code="BUS", name="Bus")
    roles = [Role(name="admin"), Role(name="agent"), Role(name="user")]
    db.add_all([damascus, aleppo, homs, company, bus, *roles])
    db.flush()

    dep_station = Station(city_id=damascus.id, name="Al-Sumariyah Terminal")
    arr_station = Station(city_id=aleppo.id, name="Al-Ramouseh Terminal")
    db.add_all([dep_station, arr_station])
    db.commit()

    return SimpleNamespace(
        damascus_id=damascus.id,
        aleppo_id=aleppo.id,
        homs_id=homs.id,
        company_id=company.id,
        transport_type_id=bus.id,
        departure_station_id=dep_station.id,
        arrival_station_id=arr_station.id,
    )


def _create_user(db, email: str, role_name: str) -> User:
    user = User(name=email.split("@")[0], email=email, password=get_password_hash("secret123"))
    db.add(user)
    db.flush()
    role = db.query(Role).filter(Role.name == role_name).one()
    db.add(UserHasRole(user_id=user.id, role_id=role.id))
    db.commit()
    return user


def _bearer(user_id: int) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


@pytest.fixture()
def admin_user(db, seed) -> User:
    return _create_user(db, "admin@example.com", "admin")


@pytest.fixture()
def admin_headers(admin_user) -> Dict[str, str]:
    return _bearer(admin_user.id)


@pytest.fixture()
def agent_headers(db, seed) -> Dict[str, str]:
    return _bearer(_create_user(db, "agent@example.com", "agent").id)


@pytest.fixture()
def user_headers(db, seed) -> Dict[str, str]:
    return _bearer(_create_user(db, "rider@example.com", "user").id)


@pytest.fixture()
def trip_payload(seed):
    """
    Build a valid create payload; keyword arguments override fields.
    """

    def _make(**overrides):
        payload = {
            "from_city": "Damascus",
            "to_city": "Aleppo",
            "company_id": seed.company_id,
            "transport_type_id": seed.transport_type_id,
            "departure_station_id": seed.departure_station_id,
            "arrival_station_id": seed.arrival_station_id,
            "departure_time": "2025-03-15T08:00:00",
            "arrival_time": "2025-03-15T12:30:00",
            "seats_total": 40,
            "price": "1000",
            "currency": "SYP",
        }
        payload.update(overrides)
        return {k: v for k, v in payload.items() if v is not None}

    return _make
