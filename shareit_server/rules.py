import datetime

from . import models
from .exceptions import (
    AlreadyProcessedError,
    ForbiddenError,
    NotFoundError,
    UnavailableItemError,
    ValidationError,
)


def validate_booking_period(start: datetime.datetime, end: datetime.datetime):
    if start >= end:
        raise ValidationError("Booking end must be after start.")


def validate_booking_creation(item: models.Item, booker_id: int):
    if not item.available:
        raise UnavailableItemError("Item is not available")
    if item.owner_id == booker_id:
        raise ForbiddenError("Owner cannot book own item")


def validate_booking_approval(booking: models.Booking, user_id: int):
    """
    Only the item's owner decides, and only once: a booking that has left
    WAITING can never be approved or rejected again.
    """
    if booking.item.owner_id != user_id:
        raise ForbiddenError("Only owner can approve booking")
    if booking.status != models.BookingStatus.WAITING:
        raise AlreadyProcessedError("Booking already processed")


def is_owner_or_booker(booking: models.Booking, user_id: int) -> bool:
    return booking.booker_id == user_id or booking.item.owner_id == user_id


def ensure_can_view_booking(booking: models.Booking, user_id: int):
    # Reported as missing so strangers cannot probe which booking ids exist
    if not is_owner_or_booker(booking, user_id):
        raise NotFoundError("Booking not found")


def ensure_can_comment(has_completed_booking: bool):
    if not has_completed_booking:
        raise ValidationError("User never booked this item")


def ensure_item_owner(item: models.Item, user_id: int):
    if item.owner_id != user_id:
        raise NotFoundError("Only owner can update item")
