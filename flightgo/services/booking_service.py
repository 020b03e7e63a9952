import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flightgo.api.schemas import BookingCreate
from flightgo.core.models import Booking, BookingStatus, Flight, SeatAssignment, User

from .exceptions import CapacityExceededError, NotFoundError, SeatConflictError
from .seat_allocation import SeatClass, SeatLockRegistry, format_seats, seat_labels

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, locks: Optional[SeatLockRegistry] = None, enforce_capacity: bool = True):
        self.locks = locks or SeatLockRegistry()
        self.enforce_capacity = enforce_capacity

    def issued_seats(
        self,
        db: Session,
        flight_id: str,
        journey_date: date,
        seat_class: Optional[SeatClass] = None,
    ) -> int:
        """Seats already issued for a flight and date, optionally for one fare class.

        Cancelled bookings keep their seats: labels are never reissued.
        """
        query = select(func.count(SeatAssignment.id)).where(
            SeatAssignment.flight_id == flight_id,
            SeatAssignment.journey_date == journey_date,
        )
        if seat_class is not None:
            query = query.where(SeatAssignment.seat_class == SeatClass(seat_class).value)
        return db.execute(query).scalar_one()

    def book_ticket(self, db: Session, request: BookingCreate) -> Booking:
        user = db.get(User, request.user_id)
        if user is None:
            raise NotFoundError(f"User {request.user_id} not found")
        flight = db.get(Flight, request.flight_id)
        if flight is None:
            raise NotFoundError(f"Flight {request.flight_id} not found")

        seat_class = SeatClass(request.seat_class)
        passengers = [p.model_dump() for p in request.passengers]

        # Capacity is shared by every fare class, so the whole departure is the lock key.
        with self.locks.lock((flight.id, request.journey_date)):
            if self.enforce_capacity:
                issued_total = self.issued_seats(db, flight.id, request.journey_date)
                available = flight.total_seats - issued_total
                if len(passengers) > available:
                    raise CapacityExceededError(flight.flight_code, len(passengers), available)

            occupied = self.issued_seats(db, flight.id, request.journey_date, seat_class)
            labels = seat_labels(seat_class, occupied, len(passengers))

            booking = Booking(
                user_id=user.id,
                flight_id=flight.id,
                flight_name=flight.flight_name,
                flight_code=flight.flight_code,
                departure=flight.origin,
                destination=flight.destination,
                email=request.email,
                mobile=request.mobile,
                passengers=passengers,
                total_price=request.total_price,
                journey_date=request.journey_date,
                journey_time=request.journey_time,
                seat_class=seat_class.value,
                seats=format_seats(labels),
                status=BookingStatus.CONFIRMED.value,
            )
            db.add(booking)
            db.flush()
            for offset, label in enumerate(labels, start=1):
                db.add(SeatAssignment(
                    booking_id=booking.id,
                    flight_id=flight.id,
                    journey_date=request.journey_date,
                    seat_class=seat_class.value,
                    seat_number=occupied + offset,
                    label=label,
                ))

            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(
                    "Seat allocation conflict on flight %s %s %s",
                    flight.flight_code, request.journey_date, seat_class.value,
                )
                raise SeatConflictError("Seats were taken by a concurrent booking, please retry")

        db.refresh(booking)
        logger.info(
            "Booked %d seat(s) on %s for %s: %s",
            len(labels), flight.flight_code, request.journey_date, booking.seats,
        )
        return booking

    def cancel_ticket(self, db: Session, booking_id: str) -> Tuple[Booking, bool]:
        """Cancel a booking. Returns the booking and whether its status changed."""
        booking = self.get_booking(db, booking_id)
        if booking.status == BookingStatus.CANCELLED.value:
            logger.info("Booking %s already cancelled", booking_id)
            return booking, False

        booking.status = BookingStatus.CANCELLED.value
        db.commit()
        db.refresh(booking)
        logger.info("Cancelled booking %s (%s)", booking_id, booking.seats)
        return booking, True

    def get_booking(self, db: Session, booking_id: str) -> Booking:
        booking = db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def list_bookings(self, db: Session, user_id: Optional[str] = None) -> List[Booking]:
        query = select(Booking)
        if user_id:
            query = query.where(Booking.user_id == user_id)
        query = query.order_by(Booking.booking_date)
        return list(db.scalars(query))
