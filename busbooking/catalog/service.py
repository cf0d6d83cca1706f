import logging
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from busbooking.models import Company, Station, TransportType, City
from busbooking.catalog.schemas import CompanyCreate, CompanyUpdate, StationCreate, Station as StationOut
from busbooking.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

class CatalogService:
    """Reference data that trips point at: companies, stations and transport types"""

    @staticmethod
    def list_companies(db: Session, include_inactive: bool = False) -> List[Company]:
        query = db.query(Company)
        if not include_inactive:
            query = query.filter(Company.is_active == True)
        return query.order_by(Company.name).all()

    @staticmethod
    def get_company(db: Session, company_id: int) -> Company:
        company = db.query(Company).filter(Company.id == company_id).first()
        if not company:
            raise NotFoundError(f"Company with ID {company_id} not found")
        return company

    @staticmethod
    def create_company(db: Session, data: CompanyCreate) -> Company:
        company = Company(**data.model_dump())
        db.add(company)
        db.commit()
        db.refresh(company)
        logger.info("Company created", extra={"company_id": company.id})
        return company

    @staticmethod
    def update_company(db: Session, company_id: int, data: CompanyUpdate) -> Company:
        company = CatalogService.get_company(db, company_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(company, field, value)
        db.commit()
        db.refresh(company)
        return company

    @staticmethod
    def set_company_active(db: Session, company_id: int, is_active: bool) -> Company:
        """Soft-delete (False) or restore (True) a company"""
        company = CatalogService.get_company(db, company_id)
        company.is_active = is_active
        db.commit()
        db.refresh(company)
        logger.info("Company %s", "restored" if is_active else "deactivated", extra={"company_id": company.id})
        return company

    @staticmethod
    def deactivate_company(db: Session, company_id: int) -> Company:
        return CatalogService.set_company_active(db, company_id, False)

    @staticmethod
    def restore_company(db: Session, company_id: int) -> Company:
        return CatalogService.set_company_active(db, company_id, True)

    @staticmethod
    def list_stations(db: Session, city_id: Optional[int] = None) -> List[StationOut]:
        query = db.query(Station).options(joinedload(Station.city))
        if city_id is not None:
            query = query.filter(Station.city_id == city_id)
        return [CatalogService.to_station_out(s) for s in query.order_by(Station.name).all()]

    @staticmethod
    def create_station(db: Session, data: StationCreate) -> StationOut:
        city = db.query(City).filter(City.id == data.city_id).first()
        if not city:
            raise ValidationError(f"City with ID {data.city_id} not found", field="city_id")
        station = Station(**data.model_dump())
        db.add(station)
        db.commit()
        db.refresh(station)
        return CatalogService.to_station_out(station)

    @staticmethod
    def to_station_out(station: Station) -> StationOut:
        return StationOut(
            id=station.id,
            city_id=station.city_id,
            name=station.name,
            address=station.address,
            city_name=station.city.name if station.city else None
        )

    @staticmethod
    def list_transport_types(db: Session) -> List[TransportType]:
        return db.query(TransportType).order_by(TransportType.id).all()
