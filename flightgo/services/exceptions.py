class ServiceError(Exception):
    """Base class for errors a request handler turns into a 4xx answer."""


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class AuthenticationError(ServiceError):
    pass


class InvalidOperationError(ServiceError):
    pass


class CapacityExceededError(ConflictError):
    def __init__(self, flight_code: str, requested: int, available: int):
        super().__init__(
            f"Not enough seats on flight {flight_code}: "
            f"requested {requested}, available {max(available, 0)}"
        )
        self.requested = requested
        self.available = available


class SeatConflictError(ConflictError):
    pass


class UnknownSeatClassError(ValueError):
    def __init__(self, seat_class):
        super().__init__(f"Unknown seat class: {seat_class!r}")
        self.seat_class = seat_class
