from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query, status

from .. import schemas
from ..client import ShareItClient, get_server_client, USER_ID_HEADER
from ..limiter import rate_limit

router = APIRouter(prefix="/bookings", tags=["Bookings"], dependencies=[Depends(rate_limit)])

UserId = Annotated[int, Header(alias=USER_ID_HEADER)]
From = Annotated[int, Query(alias="from", ge=0)]
Size = Annotated[int, Query(gt=0)]


def checked_state(state: str) -> str:
    """Rejects unknown state keywords before they reach the server."""
    booking_state = schemas.BookingState.from_keyword(state)
    if booking_state is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown state: {state}")
    return booking_state.value


@router.post("")
async def create_booking(
        booking: schemas.BookingCreate,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.post("/bookings", user_id=user_id, json=booking.model_dump(mode="json"))


@router.patch("/{booking_id}")
async def approve_booking(
        booking_id: Annotated[int, Path(gt=0)],
        approved: bool,
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.patch(
        f"/bookings/{booking_id}", user_id=user_id, params={"approved": str(approved).lower()}
    )


@router.get("/owner")
async def read_owner_bookings(
        user_id: UserId,
        state: str = "ALL",
        from_: From = 0,
        size: Size = 10,
        client: ShareItClient = Depends(get_server_client),
):
    params = {"state": checked_state(state), "from": from_, "size": size}
    return await client.get("/bookings/owner", user_id=user_id, params=params)


@router.get("/{booking_id}")
async def read_booking(
        booking_id: Annotated[int, Path(gt=0)],
        user_id: UserId,
        client: ShareItClient = Depends(get_server_client),
):
    return await client.get(f"/bookings/{booking_id}", user_id=user_id)


@router.get("")
async def read_user_bookings(
        user_id: UserId,
        state: str = "ALL",
        from_: From = 0,
        size: Size = 10,
        client: ShareItClient = Depends(get_server_client),
):
    params = {"state": checked_state(state), "from": from_, "size": size}
    return await client.get("/bookings", user_id=user_id, params=params)
