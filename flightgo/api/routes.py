from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from flightgo.core.dependencies import (
    get_booking_service,
    get_db,
    get_flight_service,
    get_user_service,
)
from flightgo.services.booking_service import BookingService
from flightgo.services.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidOperationError,
    NotFoundError,
)
from flightgo.services.flight_service import FlightService
from flightgo.services.user_service import UserService

from .schemas import (
    BookingCreate,
    BookingCreated,
    BookingResponse,
    FlightCreate,
    FlightCreated,
    FlightResponse,
    FlightUpdate,
    MessageResponse,
    UserCreate,
    UserIdRequest,
    UserLogin,
    UserResponse,
)

router = APIRouter()


# Users

@router.post("/register", response_model=UserResponse, status_code=201, tags=["users"])
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    try:
        return user_service.register(db, user_data)
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login", response_model=UserResponse, tags=["users"])
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    try:
        return user_service.authenticate(db, credentials.email, credentials.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))


def _set_operator_approval(action, user_id: str, db: Session, message: str):
    try:
        action(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": message}


@router.post("/approve-operator", response_model=MessageResponse, tags=["users"])
def approve_operator(
    body: UserIdRequest,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return _set_operator_approval(user_service.approve_operator, body.id, db, "Operator approved")


@router.post("/reject-operator", response_model=MessageResponse, tags=["users"])
def reject_operator(
    body: UserIdRequest,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return _set_operator_approval(user_service.reject_operator, body.id, db, "Operator rejected")


@router.get("/fetch-user/{user_id}", response_model=UserResponse, tags=["users"])
def fetch_user(
    user_id: str,
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    try:
        return user_service.get_user(db, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/fetch-users", response_model=List[UserResponse], tags=["users"])
def fetch_users(
    db: Session = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
):
    return user_service.list_users(db)


# Flights

@router.post("/add-flight", response_model=FlightCreated, status_code=201, tags=["flights"])
def add_flight(
    flight: FlightCreate,
    db: Session = Depends(get_db),
    flight_service: FlightService = Depends(get_flight_service),
):
    try:
        db_flight = flight_service.create_flight(db, flight)
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Flight added", "id": db_flight.id}


@router.put("/update-flight", response_model=MessageResponse, tags=["flights"])
def update_flight(
    flight_update: FlightUpdate,
    db: Session = Depends(get_db),
    flight_service: FlightService = Depends(get_flight_service),
):
    try:
        flight_service.update_flight(db, flight_update)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Flight updated"}


@router.get("/fetch-flights", response_model=List[FlightResponse], tags=["flights"])
def fetch_flights(
    db: Session = Depends(get_db),
    flight_service: FlightService = Depends(get_flight_service),
):
    return flight_service.list_flights(db)


@router.get("/fetch-flight/{flight_id}", response_model=FlightResponse, tags=["flights"])
def fetch_flight(
    flight_id: str,
    db: Session = Depends(get_db),
    flight_service: FlightService = Depends(get_flight_service),
):
    try:
        return flight_service.get_flight(db, flight_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# Bookings

@router.post("/book-ticket", response_model=BookingCreated, status_code=201, tags=["bookings"])
def book_ticket(
    booking_data: BookingCreate,
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
):
    try:
        booking = booking_service.book_ticket(db, booking_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"message": "Booking successful!", "booking": booking}


@router.put("/cancel-ticket/{booking_id}", response_model=MessageResponse, tags=["bookings"])
def cancel_ticket(
    booking_id: str,
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
):
    try:
        _, changed = booking_service.cancel_ticket(db, booking_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not changed:
        return {"message": "Booking already cancelled"}
    return {"message": "Booking cancelled"}


@router.get("/fetch-bookings", response_model=List[BookingResponse], tags=["bookings"])
def fetch_bookings(
    user_id: Optional[str] = None,
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
):
    return booking_service.list_bookings(db, user_id=user_id)


@router.get("/fetch-booking/{booking_id}", response_model=BookingResponse, tags=["bookings"])
def fetch_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    booking_service: BookingService = Depends(get_booking_service),
):
    try:
        return booking_service.get_booking(db, booking_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
