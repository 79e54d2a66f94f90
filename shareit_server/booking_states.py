"""
Booking state filters.

A state keyword (ALL, CURRENT, PAST, FUTURE, WAITING, REJECTED) names a
temporal or status filter over bookings. The same filter is available as a
plain predicate over a booking and as SQLAlchemy criteria, so the repository
and the predicate can never disagree about what a state means.
"""
import datetime
from enum import Enum as PyEnum
from typing import Callable

from .exceptions import UnsupportedStateError
from .models import Booking, BookingStatus

OWNER_PREFIX = "OWNER_"


class BookingState(PyEnum):
    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"


class BookingScope(PyEnum):
    BOOKER = "BOOKER"
    OWNER = "OWNER"


def parse_state(keyword: str) -> BookingState:
    try:
        return BookingState[keyword.strip().upper()]
    except (KeyError, AttributeError):
        raise UnsupportedStateError(f"Unknown state: {keyword}")


def resolve_state(keyword: str) -> tuple[BookingState, BookingScope]:
    """
    Maps a state keyword to its filter and scope.
    'OWNER_PAST' selects the PAST filter applied to the item owner's bookings.
    """
    if keyword is not None and keyword.strip().upper().startswith(OWNER_PREFIX):
        return parse_state(keyword.strip()[len(OWNER_PREFIX):]), BookingScope.OWNER
    return parse_state(keyword), BookingScope.BOOKER


def state_predicate(state: BookingState, now: datetime.datetime) -> Callable[[Booking], bool]:
    if state is BookingState.ALL:
        return lambda booking: True
    if state is BookingState.CURRENT:
        return lambda booking: booking.start <= now < booking.end
    if state is BookingState.PAST:
        return lambda booking: booking.end < now
    if state is BookingState.FUTURE:
        return lambda booking: booking.start > now
    if state is BookingState.WAITING:
        return lambda booking: booking.status == BookingStatus.WAITING
    if state is BookingState.REJECTED:
        return lambda booking: booking.status == BookingStatus.REJECTED
    raise UnsupportedStateError(f"Unknown state: {state}")


def state_criteria(state: BookingState, now: datetime.datetime) -> list:
    """SQL form of state_predicate, ready for Query.filter(*criteria)."""
    if state is BookingState.ALL:
        return []
    if state is BookingState.CURRENT:
        return [Booking.start <= now, Booking.end > now]
    if state is BookingState.PAST:
        return [Booking.end < now]
    if state is BookingState.FUTURE:
        return [Booking.start > now]
    if state is BookingState.WAITING:
        return [Booking.status == BookingStatus.WAITING]
    if state is BookingState.REJECTED:
        return [Booking.status == BookingStatus.REJECTED]
    raise UnsupportedStateError(f"Unknown state: {state}")


def page_offset(from_: int, size: int) -> int:
    """Offset of the page that contains position `from_`."""
    return (from_ // size) * size
