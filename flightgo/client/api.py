import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from .search import SearchQuery, filter_flights, validate_search

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SearchValidationError(ValueError):
    pass


class FlightGoClient:
    """Synchronous client for the FlightGo HTTP API.

    Pass either ``base_url`` or a ready ``httpx.Client`` (for example one
    pointed at a test application).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:6001",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("detail", response.text)
            except ValueError:
                message = response.text
            logger.debug("%s %s failed: %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, str(message))
        return response.json()

    # Accounts

    def register(self, username: str, email: str, password: str, usertype: str = "traveler") -> Dict[str, Any]:
        return self._request("POST", "/register", json={
            "username": username,
            "email": email,
            "password": password,
            "usertype": usertype,
        })

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/login", json={"email": email, "password": password})

    # Flights

    def fetch_flights(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/fetch-flights")

    def search(self, query: SearchQuery, today: Optional[date] = None) -> List[Dict[str, Any]]:
        error = validate_search(query, today)
        if error:
            raise SearchValidationError(error)
        return filter_flights(self.fetch_flights(), query)

    # Bookings

    def book_ticket(
        self,
        user_id: str,
        flight_id: str,
        passengers: List[Dict[str, Any]],
        seat_class: str,
        journey_date: date,
        total_price: float,
        email: str,
        mobile: str,
        journey_time: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/book-ticket", json={
            "user_id": user_id,
            "flight_id": flight_id,
            "passengers": passengers,
            "seat_class": seat_class,
            "journey_date": journey_date.isoformat(),
            "journey_time": journey_time,
            "total_price": total_price,
            "email": email,
            "mobile": mobile,
        })

    def cancel_ticket(self, booking_id: str) -> Dict[str, Any]:
        return self._request("PUT", f"/cancel-ticket/{booking_id}")

    def fetch_bookings(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"user_id": user_id} if user_id else None
        return self._request("GET", "/fetch-bookings", params=params)
