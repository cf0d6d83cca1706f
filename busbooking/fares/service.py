from decimal import Decimal
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from busbooking.config import settings
from busbooking.database import dialect_insert
from busbooking.exceptions import ValidationError
from busbooking.models import Fare

class FareService:
    """Single primary fare per trip, keyed by the unique trip_id"""

    def __init__(self, db: Session):
        self.db = db

    def get_fares(self, trip_id: Optional[int] = None) -> List[Fare]:
        query = self.db.query(Fare)
        if trip_id is not None:
            query = query.filter(Fare.trip_id == trip_id)
        return query.order_by(Fare.id.desc()).all()

    def get_primary_fare(self, trip_id: int) -> Optional[Fare]:
        return self.db.query(Fare).filter(Fare.trip_id == trip_id).populate_existing().first()

    def upsert_fare(self, trip_id: int, price: Optional[Decimal] = None, currency: Optional[str] = None) -> Fare:
        """Insert the trip's fare or overwrite the price and/or currency that were given.

        An existing fare keeps whatever is not given; a new fare takes
        ``settings.DEFAULT_CURRENCY`` when no currency is given. Flushes only;
        the caller commits.
        """
        changes = {}
        if price is not None:
            changes["price"] = price
        if currency:
            changes["currency"] = currency.upper()

        if price is None:
            updated = 0
            if changes:
                updated = self.db.query(Fare).filter(Fare.trip_id == trip_id).update(
                    {**changes, "updated_at": func.now()}, synchronize_session=False
                )
            if not updated:
                raise ValidationError("price is required to create a fare", field="price")
            return self.get_primary_fare(trip_id)

        new_currency = changes.get("currency", settings.DEFAULT_CURRENCY)
        insert = dialect_insert(self.db)

        if insert is not None:
            stmt = insert(Fare).values(trip_id=trip_id, price=price, currency=new_currency)
            stmt = stmt.on_conflict_do_update(
                index_elements=["trip_id"],
                set_={
                    **{field: stmt.excluded[field] for field in changes},
                    "updated_at": func.now(),
                },
            )
            self.db.execute(stmt)
        else:
            try:
                with self.db.begin_nested():
                    self.db.add(Fare(trip_id=trip_id, price=price, currency=new_currency))
            except IntegrityError:
                self.db.query(Fare).filter(Fare.trip_id == trip_id).update(
                    {**changes, "updated_at": func.now()},
                    synchronize_session=False,
                )

        return self.get_primary_fare(trip_id)
