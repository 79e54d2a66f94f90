from typing import Annotated

from fastapi import APIRouter, Depends, Header, Path, Query

from .. import schemas
from ..client import ShareItClient, get_server_client, USER_ID_HEADER
from ..limiter import rate_limit

router = APIRouter(prefix="/requests", tags=["Requests"], dependencies=[Depends(rate_limit)])

UserId = Annotated[int, Header(alias=USER_ID_HEADER)]


@router.post("")
async def create_request(
        request: schemas.ItemRequestCreate,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.post("/requests", user_id=user_id, json=request.model_dump())


@router.get("")
async def read_own_requests(user_id: UserId, client: ShareItClient = Depends(get_server_client)):
    return await client.get("/requests", user_id=user_id)


@router.get("/all")
async def read_other_requests(
        user_id: UserId,
        from_: Annotated[int, Query(alias="from", ge=0)] = 0,
        size: Annotated[int, Query(gt=0)] = 10,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get("/requests/all", user_id=user_id, params={"from": from_, "size": size})


@router.get("/{request_id}")
async def read_request(
        request_id: Annotated[int, Path(gt=0)],
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get(f"/requests/{request_id}", user_id=user_id)
