CATALOG_URL = "/api/v1/admin"


def test_company_soft_delete_and_restore(client, admin_headers, seed):
    created = client.post(
        f"{CATALOG_URL}/companies",
        json={"name": "Zenobia Lines", "phone": "+963 21 000 0000"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    company_id = created.json()["id"]

    deleted = client.delete(f"{CATALOG_URL}/companies/{company_id}", headers=admin_headers)
    assert deleted.json()["is_active"] is False

    active = client.get(f"{CATALOG_URL}/companies", headers=admin_headers).json()
    everything = client.get(f"{CATALOG_URL}/companies", params={"showAll": "true"}, headers=admin_headers).json()
    assert company_id not in [c["id"] for c in active]
    assert company_id in [c["id"] for c in everything]

    restored = client.patch(f"{CATALOG_URL}/companies/{company_id}/restore", headers=admin_headers)
    assert restored.json()["is_active"] is True


def test_company_update(client, admin_headers, seed):
    resp = client.patch(
        f"{CATALOG_URL}/companies/{seed.company_id}",
        json={"email": "info@qadmous.sy"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["email"] == "info@qadmous.sy"
    assert resp.json()["name"] == "Al-Qadmous Transport"


def test_stations_by_city(client, admin_headers, seed):
    resp = client.get(f"{CATALOG_URL}/stations", params={"city_id": seed.damascus_id}, headers=admin_headers)
    assert resp.status_code == 200
    assert [(s["name"], s["city_name"]) for s in resp.json()] == [("Al-Sumariyah Terminal", "Damascus")]


def test_station_needs_known_city(client, admin_headers, seed):
    resp = client.post(
        f"{CATALOG_URL}/stations",
        json={"city_id": 9999, "name": "Nowhere"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "city_id"


def test_transport_types(client, admin_headers, seed):
    resp = client.get(f"{CATALOG_URL}/transport-types", headers=admin_headers)
    assert [t["code"] for t in resp.json()] == ["BUS"]
