import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas, crud, models
from ..database import get_db
from ..dependencies import Page, get_existing_user
from ..exceptions import NotFoundError

logger = logging.getLogger("shareit_server")

router = APIRouter(prefix="/requests", tags=["Requests"])


def to_request_read(db: Session, request: models.ItemRequest) -> schemas.ItemRequestRead:
    return schemas.ItemRequestRead(
        id=request.id,
        description=request.description,
        created=request.created,
        items=[schemas.ItemRead.model_validate(i) for i in crud.get_items_by_request(db, request.id)],
    )


@router.post("", response_model=schemas.ItemRequestRead, status_code=status.HTTP_201_CREATED)
def create_request(
        request: schemas.ItemRequestCreate,
        requestor: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    """
    Ask for an item nobody has listed yet.
    """
    db_request = crud.create_request(db, request, requestor_id=requestor.id)
    logger.info(f"User {requestor.id} created request {db_request.id}")
    return to_request_read(db, db_request)


@router.get("", response_model=List[schemas.ItemRequestRead])
def read_own_requests(
        requestor: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    return [to_request_read(db, r) for r in crud.get_requests_by_requestor(db, requestor.id)]


@router.get("/all", response_model=List[schemas.ItemRequestRead])
def read_other_requests(
        user: models.User = Depends(get_existing_user),
        page: Page = Depends(),
        db: Session = Depends(get_db),
):
    """
    Requests made by everyone except the caller, newest first.
    """
    requests = crud.get_requests_of_others(db, user.id, skip=page.offset, limit=page.size)
    return [to_request_read(db, r) for r in requests]


@router.get("/{request_id}", response_model=schemas.ItemRequestRead)
def read_request(
        request_id: int,
        user: models.User = Depends(get_existing_user),
        db: Session = Depends(get_db),
):
    db_request = crud.get_request(db, request_id)
    if db_request is None:
        raise NotFoundError("Request not found")
    return to_request_read(db, db_request)
