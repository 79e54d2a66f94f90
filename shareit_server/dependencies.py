from typing import Annotated

from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from . import crud, models
from .booking_states import page_offset
from .database import get_db
from .exceptions import NotFoundError

USER_ID_HEADER = "X-Sharer-User-Id"

SharerUserId = Annotated[int, Header(alias=USER_ID_HEADER)]


def get_existing_user(user_id: SharerUserId, db: Session = Depends(get_db)) -> models.User:
    """
    Resolves the caller-identity header to a stored user.
    """
    db_user = crud.get_user(db, user_id)
    if db_user is None:
        raise NotFoundError("User not found")
    return db_user


class Page:
    """`from`/`size` paging parameters shared by the listing endpoints."""

    def __init__(
            self,
            from_: Annotated[int, Query(alias="from", ge=0)] = 0,
            size: Annotated[int, Query(gt=0)] = 10,
    ):
        self.size = size
        self.offset = page_offset(from_, size)
