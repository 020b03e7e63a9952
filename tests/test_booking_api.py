"""
Booking API tests: seat labels, capacity policy and the booking lifecycle.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from flightgo.main import create_app


@pytest.fixture
def traveler(create_user):
    return create_user()


@pytest.fixture
def flight(create_flight):
    return create_flight()


@pytest.fixture
def book(client, booking_payload, traveler, flight):
    def _book(passengers=1, seat_class="economy", **overrides):
        payload = booking_payload(traveler["id"], flight["id"], passengers, seat_class, **overrides)
        return client.post("/book-ticket", json=payload)
    return _book


class TestSeatAssignment:
    """Seat labels issued by /book-ticket."""

    def test_first_booking_gets_seats_from_one(self, book):
        response = book(passengers=3)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Booking successful!"
        assert data["booking"]["seats"] == "E-1, E-2, E-3"
        assert data["booking"]["status"] == "confirmed"

    def test_next_booking_continues_after_occupancy(self, book):
        book(passengers=2)
        book(passengers=1)

        response = book(passengers=2)
        assert response.json()["booking"]["seats"] == "E-4, E-5"

    @pytest.mark.parametrize("seat_class, expected", [
        ("economy", "E-1"),
        ("premium-economy", "P-1"),
        ("business", "B-1"),
        ("first-class", "A-1"),
    ])
    def test_prefix_follows_fare_class(self, book, seat_class, expected):
        response = book(seat_class=seat_class)
        assert response.json()["booking"]["seats"] == expected

    def test_fare_classes_counted_separately(self, book):
        book(passengers=3, seat_class="economy")

        response = book(passengers=2, seat_class="business")
        assert response.json()["booking"]["seats"] == "B-1, B-2"

    def test_journey_dates_counted_separately(self, book, journey_date):
        book(passengers=3)

        later = (journey_date + timedelta(days=1)).isoformat()
        response = book(passengers=1, journey_date=later)
        assert response.json()["booking"]["seats"] == "E-1"

    def test_flights_counted_separately(self, client, booking_payload, traveler, flight, create_flight):
        other = create_flight(flight_code="FG202")
        client.post("/book-ticket", json=booking_payload(traveler["id"], flight["id"], 2))

        response = client.post("/book-ticket", json=booking_payload(traveler["id"], other["id"], 1))
        assert response.json()["booking"]["seats"] == "E-1"

    def test_cancelled_booking_keeps_its_seats(self, client, book):
        first = book(passengers=2).json()["booking"]
        client.put(f"/cancel-ticket/{first['id']}")

        response = book(passengers=1)
        assert response.json()["booking"]["seats"] == "E-3"

    def test_flight_fields_copied_to_booking(self, book, flight):
        booking = book().json()["booking"]

        assert booking["flight_name"] == flight["flight_name"]
        assert booking["flight_code"] == flight["flight_code"]
        assert booking["departure"] == flight["origin"]
        assert booking["destination"] == flight["destination"]
        assert booking["passengers"][0] == {"name": "Passenger 0", "age": 30}


class TestBookingValidation:
    def test_unknown_fare_class_rejected(self, book):
        response = book(seat_class="luxury")
        assert response.status_code == 422

    def test_empty_passenger_list_rejected(self, book):
        response = book(passengers=0)
        assert response.status_code == 422

    def test_unknown_user(self, client, booking_payload, flight):
        response = client.post("/book-ticket", json=booking_payload("missing-user", flight["id"]))
        assert response.status_code == 404
        assert "User" in response.json()["detail"]

    def test_unknown_flight(self, client, booking_payload, traveler):
        response = client.post("/book-ticket", json=booking_payload(traveler["id"], "missing-flight"))
        assert response.status_code == 404
        assert "Flight" in response.json()["detail"]


class TestCapacity:
    def test_overbooking_rejected(self, client, booking_payload, traveler, create_flight):
        small = create_flight(flight_code="FG300", total_seats=3)
        ok = client.post("/book-ticket", json=booking_payload(traveler["id"], small["id"], 2))
        assert ok.status_code == 201

        response = client.post("/book-ticket", json=booking_payload(traveler["id"], small["id"], 2))
        assert response.status_code == 409
        assert "Not enough seats" in response.json()["detail"]

    def test_capacity_shared_by_fare_classes(self, client, booking_payload, traveler, create_flight):
        small = create_flight(flight_code="FG301", total_seats=2)
        client.post("/book-ticket", json=booking_payload(traveler["id"], small["id"], 2, "economy"))

        response = client.post("/book-ticket", json=booking_payload(traveler["id"], small["id"], 1, "business"))
        assert response.status_code == 409

    def test_exact_fit_allowed(self, client, booking_payload, traveler, create_flight):
        small = create_flight(flight_code="FG302", total_seats=2)
        response = client.post("/book-ticket", json=booking_payload(traveler["id"], small["id"], 2))
        assert response.status_code == 201
        assert response.json()["booking"]["seats"] == "E-1, E-2"

    def test_capacity_check_can_be_disabled(self, settings, booking_payload):
        settings.ENFORCE_SEAT_CAPACITY = False
        with TestClient(create_app(settings)) as client:
            user = client.post("/register", json={
                "username": "Oversell", "email": "over@example.com", "password": "x",
            }).json()
            flight_id = client.post("/add-flight", json={
                "flight_name": "Tiny", "flight_code": "FG1", "origin": "Pune",
                "destination": "Goa", "departure_time": "08:00", "arrival_time": "09:00",
                "base_price": 100, "total_seats": 1,
            }).json()["id"]

            response = client.post("/book-ticket", json=booking_payload(user["id"], flight_id, 3))
            assert response.status_code == 201
            assert response.json()["booking"]["seats"] == "E-1, E-2, E-3"


class TestBookingLifecycle:
    def test_cancel_booking(self, client, book):
        booking = book().json()["booking"]

        response = client.put(f"/cancel-ticket/{booking['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Booking cancelled"

        fetched = client.get(f"/fetch-booking/{booking['id']}").json()
        assert fetched["status"] == "cancelled"

    def test_cancel_twice_is_a_no_op(self, client, book):
        booking = book().json()["booking"]
        client.put(f"/cancel-ticket/{booking['id']}")

        response = client.put(f"/cancel-ticket/{booking['id']}")
        assert response.status_code == 200
        assert response.json()["message"] == "Booking already cancelled"
        assert client.get(f"/fetch-booking/{booking['id']}").json()["status"] == "cancelled"

    def test_cancel_unknown_booking(self, client):
        response = client.put("/cancel-ticket/does-not-exist")
        assert response.status_code == 404

    def test_fetch_unknown_booking(self, client):
        assert client.get("/fetch-booking/does-not-exist").status_code == 404

    def test_fetch_bookings_per_user(self, client, book, create_user, booking_payload, flight):
        book(passengers=1)
        book(passengers=2)
        other = create_user(email="other@example.com")
        client.post("/book-ticket", json=booking_payload(other["id"], flight["id"], 1))

        all_bookings = client.get("/fetch-bookings").json()
        mine = client.get("/fetch-bookings", params={"user_id": other["id"]}).json()

        assert len(all_bookings) == 3
        assert len(mine) == 1
        assert mine[0]["user_id"] == other["id"]
        assert mine[0]["seats"] == "E-4"
