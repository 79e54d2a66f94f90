import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

from .models import BookingStatus


def _not_blank(value: Optional[str], field: str) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError(f"{field} cannot be empty")
    return value


def to_local_naive(value: datetime.datetime) -> datetime.datetime:
    """Bookings are compared against local naive time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# --- Users ---

class UserCreate(BaseModel):
    name: str
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Name")


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Name")


class UserRead(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class UserShort(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


# --- Items ---

class ItemCreate(BaseModel):
    name: str
    description: str
    available: bool
    request_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Item name")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return _not_blank(v, "Item description")


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    available: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Item name")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return _not_blank(v, "Item description")


class ItemRead(BaseModel):
    id: int
    name: str
    description: str
    available: bool
    request_id: Optional[int] = None

    class Config:
        from_attributes = True


class ItemShort(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class BookingShort(BaseModel):
    id: int
    booker_id: int

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v):
        return _not_blank(v, "Comment text")


class CommentRead(BaseModel):
    id: int
    text: str
    author_name: str
    created: datetime.datetime


class ItemDetail(ItemRead):
    # Filled only when the caller owns the item
    last_booking: Optional[BookingShort] = None
    next_booking: Optional[BookingShort] = None
    comments: List[CommentRead] = []


# --- Bookings ---

class BookingCreate(BaseModel):
    item_id: int
    start: datetime.datetime
    end: datetime.datetime

    @field_validator("start", "end")
    @classmethod
    def local_time(cls, v):
        return to_local_naive(v)


class BookingRead(BaseModel):
    id: int
    start: datetime.datetime
    end: datetime.datetime
    status: BookingStatus
    booker: UserShort
    item: ItemShort

    class Config:
        from_attributes = True


# --- Requests ---

class ItemRequestCreate(BaseModel):
    description: str

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return _not_blank(v, "Request description")


class ItemRequestRead(BaseModel):
    id: int
    description: str
    created: datetime.datetime
    items: List[ItemRead] = []

    class Config:
        from_attributes = True
