from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from .. import schemas
from ..client import ShareItClient, get_server_client
from ..limiter import rate_limit

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(rate_limit)])

UserPathId = Annotated[int, Path(gt=0)]


@router.post("")
async def create_user(user: schemas.UserCreate, client: ShareItClient = Depends(get_server_client)):
    return await client.post("/users", json=user.model_dump())


@router.patch("/{user_id}")
async def update_user(
        user_id: UserPathId,
        user: schemas.UserUpdate,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.patch(f"/users/{user_id}", json=user.model_dump(exclude_unset=True))


@router.get("/{user_id}")
async def read_user(user_id: UserPathId, client: ShareItClient = Depends(get_server_client)):
    return await client.get(f"/users/{user_id}")


@router.get("")
async def read_users(
        from_: Annotated[int, Query(alias="from", ge=0)] = 0,
        size: Annotated[int, Query(gt=0)] = 10,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get("/users", params={"from": from_, "size": size})


@router.delete("/{user_id}")
async def delete_user(user_id: UserPathId, client: ShareItClient = Depends(get_server_client)):
    return await client.delete(f"/users/{user_id}")
