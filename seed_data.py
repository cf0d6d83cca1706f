#!/usr/bin/env python3

import os

from busbooking.database import SessionLocal, init_db
from busbooking.auth.utils import get_password_hash
from busbooking.cities.aliases import ARABIC_TO_ENGLISH
from busbooking.models import City, Company, Role, Station, TransportType, User, UserHasRole

TRANSPORT_TYPES = [
    ("BUS", "Bus"),
    ("VAN", "Van"),
    ("VIP_VAN", "VIP Van"),
    ("TRAIN", "Train"),
    ("SHIP", "Ship"),
]

ROLES = ["admin", "agent", "user"]

# city -> main terminals
STATIONS = {
    "Damascus": ["Al-Sumariyah Terminal", "Harasta Terminal"],
    "Aleppo": ["Al-Ramouseh Terminal"],
    "Homs": ["Homs Central Terminal"],
    "Latakia": ["Latakia Bus Station"],
    "Tartus": ["Tartus Bus Station"],
}

def get_or_create(db, model, defaults=None, **keys):
    instance = db.query(model).filter_by(**keys).first()
    if instance:
        return instance, False
    instance = model(**keys, **(defaults or {}))
    db.add(instance)
    db.flush()
    return instance, True

def create_seed_data():
    init_db()
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for the bus booking back-office...")

        # 1. Cities
        print("Creating cities...")
        cities = {}
        created_cities = 0
        for name in ARABIC_TO_ENGLISH.values():
            cities[name], created = get_or_create(db, City, name=name, defaults={"country_code": "SY"})
            created_cities += created

        # 2. Transport types
        print("Creating transport types...")
        for code, name in TRANSPORT_TYPES:
            get_or_create(db, TransportType, code=code, defaults={"name": name})

        # 3. Roles
        print("Creating roles...")
        roles = {name: get_or_create(db, Role, name=name)[0] for name in ROLES}

        # 4. Demo company
        print("Creating demo company...")
        get_or_create(
            db, Company, name="Al-Qadmous Transport",
            defaults={"email": "info@qadmous.sy", "phone": "+963 11 000 0000"}
        )

        # 5. Stations
        print("Creating stations...")
        station_count = 0
        for city_name, station_names in STATIONS.items():
            for station_name in station_names:
                _, created = get_or_create(db, Station, city_id=cities[city_name].id, name=station_name)
                station_count += created

        # 6. Admin user
        email = os.getenv("ADMIN_EMAIL", "admin@busbooking.sy")
        admin, created = get_or_create(
            db, User, email=email,
            defaults={
                "name": "Administrator",
                "password": get_password_hash(os.getenv("ADMIN_PASSWORD", "admin123")),
            }
        )
        if created:
            db.add(UserHasRole(user_id=admin.id, role_id=roles["admin"].id))

        db.commit()
        print("✅ Successfully created seed data!")
        print(f"Created:")
        print(f"  - {created_cities} cities")
        print(f"  - {len(TRANSPORT_TYPES)} transport types")
        print(f"  - {len(ROLES)} user roles")
        print(f"  - {station_count} stations")
        print(f"  - admin user {email}" if created else f"  - admin user {email} already existed")

    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
