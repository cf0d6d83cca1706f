from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
from busbooking.models import City
from busbooking.cities.aliases import city_matches_input
from busbooking.exceptions import NotFoundError

class CityService:
    @staticmethod
    def list_cities(db: Session, limit: Optional[int] = None) -> List[City]:
        """Get all cities ordered by name"""
        query = db.query(City).order_by(City.name)
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_city(db: Session, city_id: int) -> City:
        city = db.query(City).filter(City.id == city_id).first()
        if not city:
            raise NotFoundError(f"City with ID {city_id} not found")
        return city

    @staticmethod
    def get_city_by_name(db: Session, name: str) -> Optional[City]:
        """Exact, case-insensitive name lookup; aliases are not consulted"""
        return db.query(City).filter(func.lower(City.name) == name.strip().lower()).first()

    @staticmethod
    def match_city(db: Session, text: str, limit: Optional[int] = None) -> List[City]:
        """Autocomplete: cities whose name starts with `text`, Arabic input included"""
        text = text.strip()
        matches = [
            city for city in CityService.list_cities(db)
            if city_matches_input(city.name, text)
        ]
        return matches[:limit] if limit else matches
