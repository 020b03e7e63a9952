from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from flightgo.core.models import ApprovalStatus, BookingStatus, UserType
from flightgo.core.security import MAX_PASSWORD_BYTES, password_too_long
from flightgo.services.seat_allocation import SeatClass


class MessageResponse(BaseModel):
    message: str


# Users

class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    usertype: UserType = UserType.TRAVELER

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if password_too_long(value):
            raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    email: str
    password: str


class UserIdRequest(BaseModel):
    id: str


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    usertype: UserType
    approval: ApprovalStatus
    created_at: datetime

    class Config:
        from_attributes = True


# Flights

class FlightBase(BaseModel):
    flight_name: str = Field(min_length=1)
    flight_code: str = Field(min_length=1)
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    departure_time: str
    arrival_time: str
    base_price: float = Field(ge=0)
    total_seats: int = Field(gt=0)


class FlightCreate(FlightBase):
    pass


class FlightUpdate(FlightBase):
    id: str


class FlightResponse(FlightBase):
    id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FlightCreated(MessageResponse):
    id: str


# Bookings

class Passenger(BaseModel):
    name: str = Field(min_length=1)
    age: int = Field(ge=0)


class BookingCreate(BaseModel):
    user_id: str
    flight_id: str
    email: str
    mobile: str
    passengers: List[Passenger] = Field(min_length=1)
    total_price: float = Field(ge=0)
    journey_date: date
    journey_time: Optional[str] = None
    seat_class: SeatClass


class BookingResponse(BaseModel):
    id: str
    user_id: str
    flight_id: str
    flight_name: str
    flight_code: str
    departure: str
    destination: str
    email: str
    mobile: str
    passengers: List[Passenger]
    total_price: float
    journey_date: date
    journey_time: Optional[str]
    seat_class: SeatClass
    seats: str
    status: BookingStatus
    booking_date: datetime

    class Config:
        from_attributes = True


class BookingCreated(MessageResponse):
    booking: BookingResponse
