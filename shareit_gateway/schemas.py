import datetime
from enum import Enum as PyEnum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class BookingState(PyEnum):
    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional["BookingState"]:
        return cls.__members__.get(keyword.strip().upper())


def not_blank(value: Optional[str], field: str) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError(f"{field} cannot be empty")
    return value


class UserCreate(BaseModel):
    name: str = Field(max_length=255)
    email: EmailStr

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return not_blank(v, "Name")


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return not_blank(v, "Name")


class ItemCreate(BaseModel):
    name: str = Field(max_length=255)
    description: str = Field(max_length=1000)
    available: bool
    request_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return not_blank(v, "Item name")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return not_blank(v, "Item description")


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    available: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return not_blank(v, "Item name")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return not_blank(v, "Item description")


class CommentCreate(BaseModel):
    text: str = Field(max_length=2000)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v):
        return not_blank(v, "Comment text")


class BookingCreate(BaseModel):
    item_id: int = Field(gt=0)
    start: datetime.datetime
    end: datetime.datetime

    @field_validator("start", "end")
    @classmethod
    def local_time(cls, v):
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_validator("start")
    @classmethod
    def start_in_future(cls, v):
        if v < datetime.datetime.now():
            raise ValueError("Start date must be in future")
        return v

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end <= self.start:
            raise ValueError("End date must be after start date")
        return self


class ItemRequestCreate(BaseModel):
    description: str = Field(max_length=1000)

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v):
        return not_blank(v, "Request description")
