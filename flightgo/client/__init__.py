from .api import ApiError, FlightGoClient, SearchValidationError
from .search import SearchQuery, filter_flights, journey_date_for, validate_search

__all__ = [
    "ApiError",
    "FlightGoClient",
    "SearchValidationError",
    "SearchQuery",
    "filter_flights",
    "journey_date_for",
    "validate_search",
]
