import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flightgo.api.schemas import FlightCreate, FlightUpdate
from flightgo.core.models import Flight

from .exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class FlightService:
    def list_flights(self, db: Session) -> List[Flight]:
        return list(db.scalars(select(Flight).order_by(Flight.created_at)))

    def get_flight(self, db: Session, flight_id: str) -> Flight:
        flight = db.get(Flight, flight_id)
        if flight is None:
            raise NotFoundError(f"Flight {flight_id} not found")
        return flight

    def get_flight_by_code(self, db: Session, flight_code: str) -> Optional[Flight]:
        return db.scalars(select(Flight).where(Flight.flight_code == flight_code)).first()

    def create_flight(self, db: Session, flight: FlightCreate) -> Flight:
        if self.get_flight_by_code(db, flight.flight_code):
            raise ConflictError(f"Flight with code {flight.flight_code} already exists")

        db_flight = Flight(**flight.model_dump())
        db.add(db_flight)
        self._commit_flight(db, flight.flight_code)
        db.refresh(db_flight)
        logger.info("Added flight %s %s -> %s", db_flight.flight_code, db_flight.origin, db_flight.destination)
        return db_flight

    def update_flight(self, db: Session, flight_update: FlightUpdate) -> Flight:
        flight = self.get_flight(db, flight_update.id)

        other = self.get_flight_by_code(db, flight_update.flight_code)
        if other is not None and other.id != flight.id:
            raise ConflictError(f"Flight with code {flight_update.flight_code} already exists")

        for key, value in flight_update.model_dump(exclude={"id"}).items():
            setattr(flight, key, value)
        flight.updated_at = datetime.utcnow()

        self._commit_flight(db, flight_update.flight_code)
        db.refresh(flight)
        logger.info("Updated flight %s", flight.flight_code)
        return flight

    def _commit_flight(self, db: Session, flight_code: str):
        try:
            db.commit()
        except IntegrityError:
            # The code was taken between the lookup and the write
            db.rollback()
            raise ConflictError(f"Flight with code {flight_code} already exists")
