import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class UserType(str, enum.Enum):
    TRAVELER = "traveler"
    OPERATOR = "operator"
    ADMIN = "admin"


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    usertype = Column(String(20), nullable=False, default=UserType.TRAVELER.value)
    approval = Column(String(20), nullable=False, default=ApprovalStatus.APPROVED.value)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Flight(Base):
    __tablename__ = "flights"

    id = Column(String(36), primary_key=True, default=new_id)
    flight_name = Column(String(100), nullable=False)
    flight_code = Column(String(20), nullable=False, unique=True)
    origin = Column(String(100), nullable=False)
    destination = Column(String(100), nullable=False)
    departure_time = Column(String(20), nullable=False)
    arrival_time = Column(String(20), nullable=False)
    base_price = Column(Float, nullable=False)
    total_seats = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    flight_id = Column(String(36), ForeignKey("flights.id"), nullable=False)
    flight_name = Column(String(100), nullable=False)
    flight_code = Column(String(20), nullable=False)
    departure = Column(String(100), nullable=False)
    destination = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False)
    mobile = Column(String(30), nullable=False)
    passengers = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False)
    journey_date = Column(Date, nullable=False)
    journey_time = Column(String(20), nullable=True)
    seat_class = Column(String(20), nullable=False)
    seats = Column(String(1000), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    booking_date = Column(DateTime, nullable=False, default=datetime.utcnow)


class SeatAssignment(Base):
    """One issued seat label; the unique key keeps labels disjoint per fare class."""

    __tablename__ = "seat_assignments"
    __table_args__ = (
        UniqueConstraint(
            "flight_id", "journey_date", "seat_class", "seat_number",
            name="uq_seat_assignment",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    flight_id = Column(String(36), ForeignKey("flights.id"), nullable=False)
    journey_date = Column(Date, nullable=False)
    seat_class = Column(String(20), nullable=False)
    seat_number = Column(Integer, nullable=False)
    label = Column(String(20), nullable=False)
