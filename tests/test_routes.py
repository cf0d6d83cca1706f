import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker

from busbooking.database import init_db
from busbooking.exceptions import NotFoundError, ValidationError
from busbooking.models import City, Route
from busbooking.routes.service import RouteResolver


def _route_count(db) -> int:
    return db.query(func.count(Route.id)).scalar()


def test_repeated_resolution_returns_same_route(db, seed):
    resolver = RouteResolver(db)
    ids = {resolver.resolve_or_create_route(seed.damascus_id, seed.aleppo_id).id for _ in range(5)}
    db.commit()

    assert len(ids) == 1
    assert _route_count(db) == 1


def test_resolve_reports_creation_once(db, seed):
    resolver = RouteResolver(db)
    first, created = resolver.resolve(seed.damascus_id, seed.homs_id)
    again, created_again = resolver.resolve(seed.damascus_id, seed.homs_id)

    assert created is True
    assert created_again is False
    assert first.id == again.id


def test_existing_row_is_reused(db, seed):
    db.add(Route(from_city_id=seed.aleppo_id, to_city_id=seed.homs_id))
    db.commit()
    existing_id = db.query(Route.id).scalar()

    route, created = RouteResolver(db).resolve(seed.aleppo_id, seed.homs_id)

    assert not created
    assert route.id == existing_id


def test_fallback_without_on_conflict(db, seed, monkeypatch):
    monkeypatch.setattr("busbooking.routes.service.dialect_insert", lambda session: None)
    db.add(Route(from_city_id=seed.damascus_id, to_city_id=seed.aleppo_id))
    db.commit()
    existing_id = db.query(Route.id).scalar()
    resolver = RouteResolver(db)

    route, created = resolver.resolve(seed.damascus_id, seed.aleppo_id)
    fresh, fresh_created = resolver.resolve(seed.damascus_id, seed.homs_id)
    db.commit()

    assert not created
    assert route.id == existing_id
    assert fresh_created
    assert fresh.id != existing_id
    assert _route_count(db) == 2


def test_concurrent_sessions_resolve_one_route(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'routes.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with Session() as setup:
        damascus, aleppo = City(name="Damascus"), City(name="Aleppo")
        setup.add_all([damascus, aleppo])
        setup.commit()
        pair = (damascus.id, aleppo.id)

    workers = 4
    barrier = threading.Barrier(workers)

    def resolve():
        with Session() as session:
            barrier.wait()
            route_id = RouteResolver(session).resolve_or_create_route(*pair).id
            session.commit()
            return route_id

    try:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(resolve) for _ in range(workers)]
            ids = [future.result() for future in futures]

        with Session() as check:
            assert _route_count(check) == 1
        assert len(set(ids)) == 1
    finally:
        engine.dispose()


def test_routes_are_directional(db, seed):
    resolver = RouteResolver(db)
    there = resolver.resolve_or_create_route(seed.damascus_id, seed.aleppo_id)
    back = resolver.resolve_or_create_route(seed.aleppo_id, seed.damascus_id)
    db.commit()

    assert there.id != back.id
    assert _route_count(db) == 2


def test_same_city_is_rejected(db, seed):
    with pytest.raises(ValidationError):
        RouteResolver(db).resolve_or_create_route(seed.damascus_id, seed.damascus_id)
    assert _route_count(db) == 0


def test_unknown_city_is_not_found(db, seed):
    with pytest.raises(NotFoundError) as exc:
        RouteResolver(db).resolve_or_create_route(seed.damascus_id, 9999)
    assert exc.value.field == "to_city_id"
    assert _route_count(db) == 0


def test_post_route_is_idempotent(client, seed, admin_headers):
    body = {"from_city_id": seed.damascus_id, "to_city_id": seed.aleppo_id}

    first = client.post("/api/v1/admin/routes", json=body, headers=admin_headers)
    second = client.post("/api/v1/admin/routes", json=body, headers=admin_headers)

    assert first.status_code == 201
    assert second.status_code == 200
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["from_city"] == "Damascus"
    assert first.json()["to_city"] == "Aleppo"

    listed = client.get("/api/v1/admin/routes", headers=admin_headers).json()
    assert len(listed) == 1


def test_post_route_errors(client, seed, admin_headers):
    same = client.post(
        "/api/v1/admin/routes",
        json={"from_city_id": seed.homs_id, "to_city_id": seed.homs_id},
        headers=admin_headers,
    )
    assert same.status_code == 400
    assert same.json()["field"] == "to_city_id"

    unknown = client.post(
        "/api/v1/admin/routes",
        json={"from_city_id": 9999, "to_city_id": seed.homs_id},
        headers=admin_headers,
    )
    assert unknown.status_code == 404
    assert unknown.json()["field"] == "from_city_id"

    malformed = client.post(
        "/api/v1/admin/routes",
        json={"from_city_id": seed.homs_id},
        headers=admin_headers,
    )
    assert malformed.status_code == 400
    assert malformed.json()["error"] == "validation_error"
