from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, Index, CheckConstraint
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from sqlalchemy import Enum as SQLEnum
import datetime

from .database import Base


# --- ENUM for Booking Status ---
class BookingStatus(PyEnum):
    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(512), unique=True, index=True, nullable=False)

    items = relationship("Item", back_populates="owner", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="booker", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan")
    requests = relationship("ItemRequest", back_populates="requestor", cascade="all, delete-orphan")


class ItemRequest(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text, nullable=False)
    requestor_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    created = Column(TIMESTAMP, default=datetime.datetime.now, nullable=False)

    requestor = relationship("User", back_populates="requests")
    # Items answering this request; deleting the request only clears their request_id
    items = relationship("Item", back_populates="request")


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    available = Column(Boolean, nullable=False)

    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    request_id = Column(Integer, ForeignKey("requests.id"), index=True, nullable=True)

    owner = relationship("User", back_populates="items")
    request = relationship("ItemRequest", back_populates="items")
    bookings = relationship("Booking", back_populates="item", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="item", cascade="all, delete-orphan")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    start = Column(TIMESTAMP, nullable=False)
    end = Column(TIMESTAMP, nullable=False)

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    booker_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    status = Column(SQLEnum(BookingStatus), default=BookingStatus.WAITING, nullable=False)

    item = relationship("Item", back_populates="bookings")
    booker = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint('"end" > start', name="check_booking_end_after_start"),
        # Listings filter by booker (or item) and sort by start
        Index("ix_bookings_booker_start", "booker_id", "start"),
        Index("ix_bookings_item_start", "item_id", "start"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, item={self.item_id}, booker={self.booker_id}, status={self.status})>"


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(Text, nullable=False)

    item_id = Column(Integer, ForeignKey("items.id"), index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    created = Column(TIMESTAMP, default=datetime.datetime.now, nullable=False)

    item = relationship("Item", back_populates="comments")
    author = relationship("User", back_populates="comments")
