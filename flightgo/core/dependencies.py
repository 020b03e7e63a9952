from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from .database import Database


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()


def get_user_service(request: Request):
    return request.app.state.user_service


def get_flight_service(request: Request):
    return request.app.state.flight_service


def get_booking_service(request: Request):
    return request.app.state.booking_service
