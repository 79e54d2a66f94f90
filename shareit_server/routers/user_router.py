import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import schemas, crud, models
from ..database import get_db
from ..dependencies import Page
from ..exceptions import ConflictError, NotFoundError

logger = logging.getLogger("shareit_server")

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_or_404(db: Session, user_id: int) -> models.User:
    db_user = crud.get_user(db, user_id)
    if db_user is None:
        raise NotFoundError("User not found")
    return db_user


@router.post("", response_model=schemas.UserRead, status_code=status.HTTP_201_CREATED)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, user.email):
        raise ConflictError(f"Email '{user.email}' is already in use")

    # A concurrent insert can still win the race for the users.email index
    try:
        db_user = crud.create_user(db, user)
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Email '{user.email}' is already in use")

    logger.info(f"Created user {db_user.id}")
    return db_user


@router.patch("/{user_id}", response_model=schemas.UserRead)
def update_user(user_id: int, user: schemas.UserUpdate, db: Session = Depends(get_db)):
    db_user = get_user_or_404(db, user_id)

    if user.email is not None and user.email != db_user.email:
        if crud.get_user_by_email(db, user.email):
            raise ConflictError(f"Email '{user.email}' is already in use")

    try:
        db_user = crud.update_user(db, db_user, user)
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Email '{user.email}' is already in use")

    logger.info(f"Updated user {user_id}")
    return db_user


@router.get("/{user_id}", response_model=schemas.UserRead)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return get_user_or_404(db, user_id)


@router.get("", response_model=List[schemas.UserRead])
def read_users(page: Page = Depends(), db: Session = Depends(get_db)):
    return crud.get_users(db, skip=page.offset, limit=page.size)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    if not crud.delete_user(db, user_id):
        raise NotFoundError("User not found")
    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
