import datetime
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas, crud, models, rules
from ..booking_states import BookingScope, resolve_state, OWNER_PREFIX
from ..database import get_db
from ..dependencies import SharerUserId, Page, get_existing_user
from ..exceptions import NotFoundError

logger = logging.getLogger("shareit_server")

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_or_404(db: Session, booking_id: int) -> models.Booking:
    db_booking = crud.get_booking(db, booking_id)
    if db_booking is None:
        raise NotFoundError("Booking not found")
    return db_booking


@router.post("", response_model=schemas.BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
        booking: schemas.BookingCreate,
        booker: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    """
    Create a WAITING booking of someone else's available item.
    """
    rules.validate_booking_period(booking.start, booking.end)

    item = crud.get_item(db, booking.item_id)
    if item is None:
        raise NotFoundError("Item not found")
    rules.validate_booking_creation(item, booker.id)

    db_booking = crud.create_booking(db=db, booking=booking, item=item, booker_id=booker.id)
    logger.info(f"User {booker.id} booked item {item.id} as booking {db_booking.id}")
    return db_booking


@router.patch("/{booking_id}", response_model=schemas.BookingRead)
def approve_booking(
        booking_id: int,
        approved: bool,
        user_id: SharerUserId,
        db: Session = Depends(get_db),
):
    """
    Approve or reject a WAITING booking. Only the item owner may decide.
    """
    db_booking = get_booking_or_404(db, booking_id)
    rules.validate_booking_approval(db_booking, user_id)

    db_booking = crud.set_booking_status(db, db_booking, approved)
    logger.info(f"Owner {user_id} set booking {booking_id} to {db_booking.status.value}")
    return db_booking


@router.get("/owner", response_model=List[schemas.BookingRead])
def read_owner_bookings(
        owner: models.User = Depends(get_existing_user),
        state: str = "ALL",
        page: Page = Depends(),
        db: Session = Depends(get_db),
):
    """
    Bookings of the caller's items filtered by state.
    """
    booking_state, scope = resolve_state(OWNER_PREFIX + state)
    return crud.get_bookings(
        db,
        user_id=owner.id,
        state=booking_state,
        now=datetime.datetime.now(),
        skip=page.offset,
        limit=page.size,
        owner=scope is BookingScope.OWNER,
    )


@router.get("/{booking_id}", response_model=schemas.BookingRead)
def read_booking(
        booking_id: int,
        user_id: SharerUserId,
        db: Session = Depends(get_db),
):
    db_booking = get_booking_or_404(db, booking_id)
    rules.ensure_can_view_booking(db_booking, user_id)
    return db_booking


@router.get("", response_model=List[schemas.BookingRead])
def read_user_bookings(
        booker: models.User = Depends(get_existing_user),
        state: str = "ALL",
        page: Page = Depends(),
        db: Session = Depends(get_db),
):
    """
    Bookings made by the caller filtered by state.
    """
    booking_state, scope = resolve_state(state)
    return crud.get_bookings(
        db,
        user_id=booker.id,
        state=booking_state,
        now=datetime.datetime.now(),
        skip=page.offset,
        limit=page.size,
        owner=scope is BookingScope.OWNER,
    )
