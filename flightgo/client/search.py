"""
Flight search as performed by the booking client.

Searching never hits a search endpoint: the client validates the form,
fetches every flight and keeps the ones on the requested route locally.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

FILL_ALL_INPUTS = "Please fill all the inputs"
CHECK_DATES = "Please check the dates"


class SearchQuery(BaseModel):
    departure: str = ""
    destination: str = ""
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    round_trip: bool = False


def validate_search(query: SearchQuery, today: Optional[date] = None) -> Optional[str]:
    """Return the message to show the user, or None when the search may run.

    One-way trips may leave today. Round trips must leave after today and
    come back after the outbound date.
    """
    today = today or date.today()

    if not query.departure or not query.destination or query.departure_date is None:
        return FILL_ALL_INPUTS

    if query.round_trip:
        if query.return_date is None:
            return FILL_ALL_INPUTS
        if query.departure_date <= today or query.return_date <= query.departure_date:
            return CHECK_DATES
        return None

    if query.departure_date < today:
        return CHECK_DATES
    return None


def _on_route(flight: Dict[str, Any], origin: str, destination: str) -> bool:
    return flight.get("origin") == origin and flight.get("destination") == destination


def filter_flights(flights: List[Dict[str, Any]], query: SearchQuery) -> List[Dict[str, Any]]:
    outbound = [f for f in flights if _on_route(f, query.departure, query.destination)]
    # No outbound leg means nothing to show, even on a round trip
    if not outbound or not query.round_trip:
        return outbound

    return [
        f for f in flights
        if _on_route(f, query.departure, query.destination)
        or _on_route(f, query.destination, query.departure)
    ]


def journey_date_for(flight: Dict[str, Any], query: SearchQuery) -> Optional[date]:
    if flight.get("origin") == query.departure:
        return query.departure_date
    if flight.get("origin") == query.destination:
        return query.return_date
    return None
