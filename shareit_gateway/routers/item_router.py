from typing import Annotated

from fastapi import APIRouter, Depends, Header, Path, Query

from .. import schemas
from ..client import ShareItClient, get_server_client, USER_ID_HEADER
from ..limiter import rate_limit

router = APIRouter(prefix="/items", tags=["Items"], dependencies=[Depends(rate_limit)])

UserId = Annotated[int, Header(alias=USER_ID_HEADER)]
ItemId = Annotated[int, Path(gt=0)]
From = Annotated[int, Query(alias="from", ge=0)]
Size = Annotated[int, Query(gt=0)]


@router.post("")
async def create_item(
        item: schemas.ItemCreate,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.post("/items", user_id=user_id, json=item.model_dump())


@router.patch("/{item_id}")
async def update_item(
        item_id: ItemId,
        item: schemas.ItemUpdate,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.patch(f"/items/{item_id}", user_id=user_id, json=item.model_dump(exclude_unset=True))


@router.get("/search")
async def search_items(
        text: str = "",
        from_: From = 0,
        size: Size = 10,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get("/items/search", params={"text": text, "from": from_, "size": size})


@router.get("/{item_id}")
async def read_item(
        item_id: ItemId,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get(f"/items/{item_id}", user_id=user_id)


@router.get("")
async def read_owner_items(
        user_id: UserId,
        from_: From = 0,
        size: Size = 10,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get("/items", user_id=user_id, params={"from": from_, "size": size})


@router.post("/{item_id}/comment")
async def create_comment(
        item_id: ItemId,
        comment: schemas.CommentCreate,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.post(f"/items/{item_id}/comment", user_id=user_id, json=comment.model_dump())
