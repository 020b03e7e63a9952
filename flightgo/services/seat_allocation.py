"""
Seat labels for a booking.

Labels are issued per (flight, journey date, fare class) as ``{code}-{n}``
with ``n`` counting up from 1. A booking of N passengers on a key that
already has ``k`` issued seats receives ``{code}-{k+1}`` .. ``{code}-{k+N}``.
"""

import enum
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List, Union

from .exceptions import UnknownSeatClassError


class SeatClass(str, enum.Enum):
    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium-economy"
    BUSINESS = "business"
    FIRST_CLASS = "first-class"


SEAT_CODES: Dict[SeatClass, str] = {
    SeatClass.ECONOMY: "E",
    SeatClass.PREMIUM_ECONOMY: "P",
    SeatClass.BUSINESS: "B",
    SeatClass.FIRST_CLASS: "A",
}


def seat_code(seat_class: Union[SeatClass, str]) -> str:
    try:
        return SEAT_CODES[SeatClass(seat_class)]
    except ValueError:
        raise UnknownSeatClassError(seat_class) from None


def seat_labels(seat_class: Union[SeatClass, str], occupied: int, count: int) -> List[str]:
    if occupied < 0 or count < 0:
        raise ValueError("occupied and count must not be negative")
    code = seat_code(seat_class)
    return [f"{code}-{number}" for number in range(occupied + 1, occupied + count + 1)]


def format_seats(labels: List[str]) -> str:
    return ", ".join(labels)


class SeatLockRegistry:
    """One lock per allocation key, held only while someone uses it.

    Holding the lock for a key makes the count-then-insert sequence of a
    booking atomic with respect to every other booking on the same key
    within this process. A key's entry is dropped once no thread holds or
    waits on its lock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[Hashable, list] = {}

    @contextmanager
    def lock(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
