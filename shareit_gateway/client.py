import logging
from typing import Any, Optional

import httpx
from fastapi import HTTPException, Request, Response, status

from .config import settings

logger = logging.getLogger("shareit_gateway")

USER_ID_HEADER = "X-Sharer-User-Id"


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.SHAREIT_SERVER_URL,
        timeout=settings.SERVER_TIMEOUT_SECONDS,
    )


class ShareItClient:
    """
    Forwards validated requests to the ShareIt server and hands the server's
    answer back unchanged.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def request(
            self,
            method: str,
            path: str,
            user_id: Optional[int] = None,
            params: Optional[dict] = None,
            json: Any = None,
    ) -> Response:
        headers = {}
        if user_id is not None:
            headers[USER_ID_HEADER] = str(user_id)
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            server_response = await self.http_client.request(
                method, path, headers=headers, params=params, json=json
            )
        except httpx.RequestError as e:
            logger.error(f"Failed to reach ShareIt server for {method} {path}: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="ShareIt server is unavailable",
            )

        logger.info(f"{method} {path} -> {server_response.status_code}")
        return Response(
            content=server_response.content,
            status_code=server_response.status_code,
            media_type=server_response.headers.get("content-type", "application/json"),
        )

    async def get(self, path: str, user_id: Optional[int] = None, params: Optional[dict] = None) -> Response:
        return await self.request("GET", path, user_id=user_id, params=params)

    async def post(self, path: str, user_id: Optional[int] = None, json: Any = None) -> Response:
        return await self.request("POST", path, user_id=user_id, json=json)

    async def patch(self, path: str, user_id: Optional[int] = None, params: Optional[dict] = None,
                    json: Any = None) -> Response:
        return await self.request("PATCH", path, user_id=user_id, params=params, json=json)

    async def delete(self, path: str, user_id: Optional[int] = None) -> Response:
        return await self.request("DELETE", path, user_id=user_id)


def get_server_client(request: Request) -> ShareItClient:
    return ShareItClient(request.app.state.http_client)
