import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from . import models, schemas
from .booking_states import BookingState, state_criteria


# --- Users ---

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100):
    return db.query(models.User).order_by(models.User.id).offset(skip).limit(limit).all()


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    db_user = models.User(name=user.name, email=user.email)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user: models.User, user: schemas.UserUpdate) -> models.User:
    for key, value in user.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(db_user, key, value)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, user_id: int) -> bool:
    db_user = get_user(db, user_id)
    if db_user:
        db.delete(db_user)
        db.commit()
        return True
    return False


# --- Items ---

def get_item(db: Session, item_id: int) -> Optional[models.Item]:
    return db.query(models.Item).filter(models.Item.id == item_id).first()


def get_items_by_owner(db: Session, owner_id: int, skip: int = 0, limit: int = 100):
    return (
        db.query(models.Item)
        .filter(models.Item.owner_id == owner_id)
        .order_by(models.Item.id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_items_by_request(db: Session, request_id: int):
    return db.query(models.Item).filter(models.Item.request_id == request_id).order_by(models.Item.id).all()


def search_items(db: Session, text: str, skip: int = 0, limit: int = 100):
    """
    Available items whose name or description contains `text`, ignoring case.
    """
    # % and _ in the text match literally
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return (
        db.query(models.Item)
        .filter(
            models.Item.available.is_(True),
            or_(
                models.Item.name.ilike(pattern, escape="\\"),
                models.Item.description.ilike(pattern, escape="\\"),
            ),
        )
        .order_by(models.Item.id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_item(db: Session, item: schemas.ItemCreate, owner_id: int) -> models.Item:
    db_item = models.Item(**item.model_dump(), owner_id=owner_id)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def update_item(db: Session, db_item: models.Item, item: schemas.ItemUpdate) -> models.Item:
    for key, value in item.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(db_item, key, value)
    db.commit()
    db.refresh(db_item)
    return db_item


# --- Bookings ---

def get_booking(db: Session, booking_id: int) -> Optional[models.Booking]:
    return db.query(models.Booking).filter(models.Booking.id == booking_id).first()


def get_bookings(
        db: Session,
        user_id: int,
        state: BookingState,
        now: datetime.datetime,
        skip: int = 0,
        limit: int = 10,
        owner: bool = False,
):
    """
    Bookings made by `user_id`, or with owner=True bookings of the items
    `user_id` owns, filtered by `state` and ordered newest start first.
    """
    query = db.query(models.Booking)
    if owner:
        query = query.join(models.Item, models.Booking.item_id == models.Item.id).filter(
            models.Item.owner_id == user_id
        )
    else:
        query = query.filter(models.Booking.booker_id == user_id)

    return (
        query.filter(*state_criteria(state, now))
        .order_by(models.Booking.start.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_last_booking(db: Session, item_id: int, now: datetime.datetime) -> Optional[models.Booking]:
    return (
        db.query(models.Booking)
        .filter(
            models.Booking.item_id == item_id,
            models.Booking.start < now,
            models.Booking.status == models.BookingStatus.APPROVED,
        )
        .order_by(models.Booking.start.desc())
        .first()
    )


def get_next_booking(db: Session, item_id: int, now: datetime.datetime) -> Optional[models.Booking]:
    return (
        db.query(models.Booking)
        .filter(
            models.Booking.item_id == item_id,
            models.Booking.start > now,
            models.Booking.status == models.BookingStatus.APPROVED,
        )
        .order_by(models.Booking.start.asc())
        .first()
    )


def has_completed_booking(db: Session, item_id: int, user_id: int, now: datetime.datetime) -> bool:
    """
    True if `user_id` has a finished, non-rejected booking of the item.
    """
    completed = db.query(models.Booking).filter(
        models.Booking.item_id == item_id,
        models.Booking.booker_id == user_id,
        models.Booking.end < now,
        models.Booking.status != models.BookingStatus.REJECTED,
    ).first()

    return completed is not None


def create_booking(db: Session, booking: schemas.BookingCreate, item: models.Item, booker_id: int):
    db_booking = models.Booking(
        item_id=item.id,
        booker_id=booker_id,
        start=booking.start,
        end=booking.end,
        status=models.BookingStatus.WAITING,
    )
    db.add(db_booking)
    db.commit()
    db.refresh(db_booking)
    return db_booking


def set_booking_status(db: Session, db_booking: models.Booking, approved: bool) -> models.Booking:
    db_booking.status = models.BookingStatus.APPROVED if approved else models.BookingStatus.REJECTED
    db.commit()
    db.refresh(db_booking)
    return db_booking


# --- Comments ---

def get_comments_by_item(db: Session, item_id: int):
    return (
        db.query(models.Comment)
        .filter(models.Comment.item_id == item_id)
        .order_by(models.Comment.created.desc(), models.Comment.id.desc())
        .all()
    )


def create_comment(db: Session, comment: schemas.CommentCreate, item_id: int, author_id: int):
    db_comment = models.Comment(
        text=comment.text,
        item_id=item_id,
        author_id=author_id,
        created=datetime.datetime.now(),
    )
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment


# --- Item requests ---

def get_request(db: Session, request_id: int) -> Optional[models.ItemRequest]:
    return db.query(models.ItemRequest).filter(models.ItemRequest.id == request_id).first()


def get_requests_by_requestor(db: Session, requestor_id: int, skip: int = 0, limit: int = 100):
    return (
        db.query(models.ItemRequest)
        .filter(models.ItemRequest.requestor_id == requestor_id)
        .order_by(models.ItemRequest.created.desc(), models.ItemRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_requests_of_others(db: Session, user_id: int, skip: int = 0, limit: int = 10):
    return (
        db.query(models.ItemRequest)
        .filter(models.ItemRequest.requestor_id != user_id)
        .order_by(models.ItemRequest.created.desc(), models.ItemRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_request(db: Session, request: schemas.ItemRequestCreate, requestor_id: int):
    db_request = models.ItemRequest(
        description=request.description,
        requestor_id=requestor_id,
        created=datetime.datetime.now(),
    )
    db.add(db_request)
    db.commit()
    db.refresh(db_request)
    return db_request
