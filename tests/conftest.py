from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from flightgo.core.config import Settings
from flightgo.core.database import Database
from flightgo.main import create_app

DEFAULT_PASSWORD = "Pass123!"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'flightgo_test.db'}",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="warning",
        DEFAULT_ADMIN_EMAIL="admin@test.com",
        DEFAULT_ADMIN_PASSWORD="admin-pass",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture
def journey_date():
    return date.today() + timedelta(days=14)


@pytest.fixture
def create_user(client):
    def _create(email="traveler@example.com", usertype="traveler", username="Traveler"):
        response = client.post("/register", json={
            "username": username,
            "email": email,
            "password": DEFAULT_PASSWORD,
            "usertype": usertype,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_flight(client):
    def _create(flight_code="FG101", origin="Chennai", destination="Delhi", total_seats=180, **overrides):
        payload = {
            "flight_name": "FlightGo Express",
            "flight_code": flight_code,
            "origin": origin,
            "destination": destination,
            "departure_time": "10:30",
            "arrival_time": "13:15",
            "base_price": 4500.0,
            "total_seats": total_seats,
        }
        payload.update(overrides)
        response = client.post("/add-flight", json=payload)
        assert response.status_code == 201, response.text
        return client.get(f"/fetch-flight/{response.json()['id']}").json()
    return _create


@pytest.fixture
def booking_payload(journey_date):
    def _payload(user_id, flight_id, passengers=1, seat_class="economy", **overrides):
        payload = {
            "user_id": user_id,
            "flight_id": flight_id,
            "email": "traveler@example.com",
            "mobile": "9876543210",
            "passengers": [{"name": f"Passenger {i}", "age": 30 + i} for i in range(passengers)],
            "total_price": 4500.0 * passengers,
            "journey_date": journey_date.isoformat(),
            "journey_time": "10:30",
            "seat_class": seat_class,
        }
        payload.update(overrides)
        return payload
    return _payload
