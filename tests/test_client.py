"""FlightGoClient against the application and against a stub transport."""

from datetime import date, timedelta

import httpx
import pytest

from flightgo.client import ApiError, FlightGoClient, SearchQuery, SearchValidationError


@pytest.fixture
def api(client):
    return FlightGoClient(http_client=client)


class TestClientSearch:
    def test_invalid_search_sends_no_request(self):
        def handler(request):
            raise AssertionError(f"unexpected request {request.url}")

        http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://test")
        api = FlightGoClient(http_client=http)
        query = SearchQuery(departure="Chennai", destination="Delhi",
                            departure_date=date.today() - timedelta(days=1))

        with pytest.raises(SearchValidationError, match="Please check the dates"):
            api.search(query)

    def test_search_filters_fetched_flights(self, api, create_flight):
        outbound = create_flight(flight_code="FG1", origin="Chennai", destination="Delhi")
        inbound = create_flight(flight_code="FG2", origin="Delhi", destination="Chennai")
        create_flight(flight_code="FG3", origin="Pune", destination="Delhi")

        today = date.today()
        query = SearchQuery(
            departure="Chennai",
            destination="Delhi",
            departure_date=today + timedelta(days=2),
            return_date=today + timedelta(days=9),
            round_trip=True,
        )
        result = api.search(query, today=today)

        assert {f["id"] for f in result} == {outbound["id"], inbound["id"]}


class TestClientBooking:
    def test_register_book_and_cancel(self, api, create_flight, journey_date):
        flight = create_flight()
        user = api.register("Bob", "bob@example.com", "secret")
        assert api.login("bob@example.com", "secret")["id"] == user["id"]

        booked = api.book_ticket(
            user_id=user["id"],
            flight_id=flight["id"],
            passengers=[{"name": "Bob", "age": 40}, {"name": "Eve", "age": 38}],
            seat_class="premium-economy",
            journey_date=journey_date,
            total_price=9000.0,
            email="bob@example.com",
            mobile="555-0100",
        )
        assert booked["booking"]["seats"] == "P-1, P-2"

        assert api.cancel_ticket(booked["booking"]["id"])["message"] == "Booking cancelled"
        bookings = api.fetch_bookings(user_id=user["id"])
        assert [b["status"] for b in bookings] == ["cancelled"]

    def test_api_error_carries_status(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.cancel_ticket("missing")

        assert excinfo.value.status_code == 404
        assert "not found" in excinfo.value.message
