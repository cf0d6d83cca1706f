from datetime import date, datetime, time

import pytest

from busbooking.models import Company, Route, Trip
from busbooking.trips.filtering import filter_trips
from busbooking.trips.schemas import TripFilters, TripListItem
from busbooking.trips.service import TripService

# id, from, to, departure, company
FIXED_TRIPS = [
    (1, "Damascus", "Aleppo", datetime(2025, 3, 10, 6, 30), "Al-Qadmous Transport"),
    (2, "Aleppo", "Damascus", datetime(2025, 3, 11, 14, 0), "Kadmous Express"),
    (3, "Damascus", "Homs", datetime(2025, 3, 12, 23, 59), "Al-Ahliah"),
    (4, "Homs", "Aleppo", datetime(2025, 3, 13, 0, 0), "Al-Qadmous Transport"),
    (5, "Aleppo", "Homs", datetime(2025, 3, 14, 12, 0), "Zenobia Lines"),
]

CASES = [
    (TripFilters(), [1, 2, 3, 4, 5]),
    (TripFilters(city_contains="", company_contains=""), [1, 2, 3, 4, 5]),
    (TripFilters(date_from=date(2025, 3, 12)), [3, 4, 5]),
    (TripFilters(date_to=date(2025, 3, 12)), [1, 2, 3]),
    (TripFilters(date_from=date(2025, 3, 12), date_to=date(2025, 3, 12)), [3]),
    (TripFilters(time_from=time(12, 0)), [2, 3, 5]),
    (TripFilters(time_to=time(6, 30)), [1, 4]),
    (TripFilters(time_from=time(6, 30), time_to=time(14, 0)), [1, 2, 5]),
    (TripFilters(city_contains="homs"), [3, 4, 5]),
    (TripFilters(city_contains="ALEP"), [1, 2, 4, 5]),
    (TripFilters(company_contains="qadmous"), [1, 4]),
    (TripFilters(company_contains="al-"), [1, 3, 4]),
    (TripFilters(city_contains="damascus", company_contains="qadmous"), [1]),
    (TripFilters(date_from=date(2025, 3, 11), time_to=time(0, 0)), [4]),
]


def _item(trip_id, from_city, to_city, departure, company) -> TripListItem:
    return TripListItem(
        id=trip_id,
        route_id=1,
        company_id=1,
        transport_type_id=1,
        departure_station_id=1,
        arrival_station_id=2,
        departure_time=departure,
        arrival_time=departure.replace(hour=23, minute=59),
        seats_total=40,
        seats_available=40,
        from_city=from_city,
        to_city=to_city,
        company_name=company,
    )


@pytest.fixture()
def fixed_items():
    return [_item(*row) for row in FIXED_TRIPS]


@pytest.mark.parametrize("filters,expected", CASES)
def test_pure_filter(fixed_items, filters, expected):
    assert [t.id for t in filter_trips(fixed_items, filters)] == expected


def test_filter_without_filters_returns_everything(fixed_items):
    assert filter_trips(fixed_items, None) == fixed_items


def test_blank_query_values_are_no_ops():
    assert TripFilters(date_from="", time_to="", city_contains="").is_empty()


def test_date_filter_drops_trips_without_departure(fixed_items):
    undated = fixed_items[0].model_copy(update={"id": 6, "departure_time": None})
    items = fixed_items + [undated]

    assert 6 in [t.id for t in filter_trips(items, TripFilters(city_contains="dam"))]
    assert 6 not in [t.id for t in filter_trips(items, TripFilters(date_from=date(2025, 1, 1)))]


@pytest.fixture()
def stored_trips(db, seed):
    """The same five trips, persisted so their ids are 1..5"""
    city_ids = {"Damascus": seed.damascus_id, "Aleppo": seed.aleppo_id, "Homs": seed.homs_id}
    companies = {"Al-Qadmous Transport": seed.company_id}
    for name in ("Kadmous Express", "Al-Ahliah", "Zenobia Lines"):
        company = Company(name=name)
        db.add(company)
        db.flush()
        companies[name] = company.id

    routes = {}
    for _, from_city, to_city, departure, company in FIXED_TRIPS:
        key = (city_ids[from_city], city_ids[to_city])
        if key not in routes:
            route = Route(from_city_id=key[0], to_city_id=key[1])
            db.add(route)
            db.flush()
            routes[key] = route.id
        db.add(Trip(
            route_id=routes[key],
            company_id=companies[company],
            transport_type_id=seed.transport_type_id,
            departure_station_id=seed.departure_station_id,
            arrival_station_id=seed.arrival_station_id,
            departure_time=departure,
            arrival_time=departure.replace(hour=23, minute=59),
            seats_total=40,
            seats_available=40,
        ))
        db.flush()
    db.commit()


@pytest.mark.parametrize("filters,expected", CASES)
def test_server_side_filter_matches_pure_filter(db, stored_trips, filters, expected):
    service = TripService(db)
    everything = service.list_trips()

    in_database = service.list_trips(filters=filters)

    assert [t.id for t in in_database] == [t.id for t in filter_trips(everything, filters)]
    assert sorted(t.id for t in in_database) == expected


def test_filter_query_parameters(client, admin_headers, stored_trips):
    resp = client.get(
        "/api/v1/admin/trips",
        params={"city": "homs", "time_from": "12:00"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [5, 3]


def test_empty_filter_parameters_are_ignored(client, admin_headers, stored_trips):
    resp = client.get(
        "/api/v1/admin/trips",
        params={"date_from": "", "city": "", "company": ""},
        headers=admin_headers,
    )
    assert [t["id"] for t in resp.json()] == [5, 4, 3, 2, 1]


def test_malformed_filter_is_400(client, admin_headers, stored_trips):
    resp = client.get("/api/v1/admin/trips", params={"date_from": "yesterday"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["field"] == "date_from"


def test_latest_possible_date_to_is_inclusive(client, db, admin_headers, stored_trips):
    resp = client.get("/api/v1/admin/trips", params={"date_to": "9999-12-31"}, headers=admin_headers)

    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [5, 4, 3, 2, 1]
    assert len(TripService(db).list_trips(filters=TripFilters(date_to=date.max))) == 5
