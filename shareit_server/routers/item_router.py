import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas, crud, models, rules
from ..database import get_db
from ..dependencies import SharerUserId, Page, get_existing_user
from ..exceptions import NotFoundError

logger = logging.getLogger("shareit_server")

router = APIRouter(prefix="/items", tags=["Items"])


def get_item_or_404(db: Session, item_id: int) -> models.Item:
    db_item = crud.get_item(db, item_id)
    if db_item is None:
        raise NotFoundError("Item not found")
    return db_item


def to_comment_read(comment: models.Comment) -> schemas.CommentRead:
    return schemas.CommentRead(
        id=comment.id,
        text=comment.text,
        author_name=comment.author.name,
        created=comment.created,
    )


def to_item_detail(db: Session, item: models.Item, user_id: Optional[int]) -> schemas.ItemDetail:
    """
    Item with its comments; the owner additionally sees the last and next
    approved bookings.
    """
    detail = schemas.ItemDetail(**schemas.ItemRead.model_validate(item).model_dump())
    if item.owner_id == user_id:
        now = datetime.datetime.now()
        last_booking = crud.get_last_booking(db, item.id, now)
        next_booking = crud.get_next_booking(db, item.id, now)
        if last_booking:
            detail.last_booking = schemas.BookingShort.model_validate(last_booking)
        if next_booking:
            detail.next_booking = schemas.BookingShort.model_validate(next_booking)
    detail.comments = [to_comment_read(c) for c in crud.get_comments_by_item(db, item.id)]
    return detail


@router.post("", response_model=schemas.ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
        item: schemas.ItemCreate,
        owner: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    if item.request_id is not None and crud.get_request(db, item.request_id) is None:
        raise NotFoundError("Request not found")

    db_item = crud.create_item(db=db, item=item, owner_id=owner.id)
    logger.info(f"User {owner.id} listed item {db_item.id}")
    return db_item


@router.patch("/{item_id}", response_model=schemas.ItemDetail)
def update_item(
        item_id: int,
        item: schemas.ItemUpdate,
        owner: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    db_item = get_item_or_404(db, item_id)
    rules.ensure_item_owner(db_item, owner.id)

    db_item = crud.update_item(db, db_item, item)
    logger.info(f"User {owner.id} updated item {item_id}")
    return to_item_detail(db, db_item, owner.id)


@router.get("/search", response_model=List[schemas.ItemRead])
def search_items(
        text: str = "",
        page: Page = Depends(),
        db: Session = Depends(get_db),
):
    """
    Available items whose name or description contains `text`.
    """
    if not text.strip():
        return []
    return crud.search_items(db, text, skip=page.offset, limit=page.size)


@router.get("/{item_id}", response_model=schemas.ItemDetail)
def read_item(
        item_id: int,
        user: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    db_item = get_item_or_404(db, item_id)
    return to_item_detail(db, db_item, user.id)


@router.get("", response_model=List[schemas.ItemDetail])
def read_owner_items(
        owner: models.User = Depends(get_existing_user),
        page: Page = Depends(),
        db: Session = Depends(get_db),
):
    items = crud.get_items_by_owner(db, owner.id, skip=page.offset, limit=page.size)
    return [to_item_detail(db, item, owner.id) for item in items]


@router.post("/{item_id}/comment", response_model=schemas.CommentRead, status_code=status.HTTP_201_CREATED)
def create_comment(
        item_id: int,
        comment: schemas.CommentCreate,
        author: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    """
    Leave a comment on an item the caller has finished renting.
    """
    db_item = get_item_or_404(db, item_id)
    rules.ensure_can_comment(
        crud.has_completed_booking(db, db_item.id, author.id, datetime.datetime.now())
    )

    db_comment = crud.create_comment(db, comment, item_id=db_item.id, author_id=author.id)
    logger.info(f"User {author.id} commented on item {item_id}")
    return to_comment_read(db_comment)
