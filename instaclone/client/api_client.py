"""Async HTTP client for the instaclone API.

Unwraps the `{success, data, error}` envelope: successful calls return `data`,
failures raise `ApiError` carrying the server's error string and status.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

import httpx

from instaclone.client.errors import ApiError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: Union[str, TokenProvider, None] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict:
        token = self._token() if callable(self._token) else self._token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._http.request(
                method, path, headers=self._headers(), **kwargs
            )
        except httpx.TransportError as exc:
            logger.warning("Network error calling %s %s: %s", method, path, exc)
            raise ApiError.network() from exc
        return self._unwrap(response)

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        body = None
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError:
                body = None

        if response.is_success:
            if isinstance(body, dict) and "success" in body:
                if body.get("success"):
                    return body.get("data")
                raise ApiError(
                    body.get("error") or "Request failed",
                    status=response.status_code,
                    code=body.get("code"),
                )
            if body is None:
                raise ApiError(
                    "The server returned an unexpected response.",
                    status=response.status_code,
                )
            return body

        if isinstance(body, dict) and body.get("error"):
            raise ApiError(
                str(body["error"]), status=response.status_code, code=body.get("code")
            )
        raise ApiError.from_status(response.status_code)

    # Posts

    async def list_posts(
        self, *, limit: int = 10, offset: int = 0, user_id: Optional[str] = None
    ) -> list:
        params = {"limit": limit, "offset": offset}
        if user_id:
            params["userId"] = user_id
        return await self.request("GET", "/api/posts", params=params)

    async def get_post(self, post_id: str) -> dict:
        return await self.request("GET", f"/api/posts/{post_id}")

    async def create_post(
        self,
        image: bytes,
        *,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
        caption: Optional[str] = None,
    ) -> dict:
        data = {"caption": caption} if caption is not None else None
        files = {"image": (filename, image, content_type)}
        return await self.request("POST", "/api/posts", data=data, files=files)

    async def delete_post(self, post_id: str) -> None:
        await self.request("DELETE", f"/api/posts/{post_id}")

    # Likes

    async def like(self, post_id: str) -> dict:
        return await self.request("POST", "/api/likes", json={"postId": post_id})

    async def unlike(self, post_id: str) -> None:
        await self.request("DELETE", "/api/likes", json={"postId": post_id})

    # Comments

    async def add_comment(self, post_id: str, content: str) -> dict:
        return await self.request(
            "POST", "/api/comments", json={"postId": post_id, "content": content}
        )

    async def delete_comment(self, comment_id: str) -> None:
        await self.request("DELETE", "/api/comments", json={"commentId": comment_id})

    # Follows

    async def follow(self, user_id: str) -> dict:
        return await self.request("POST", "/api/follows", json={"followingId": user_id})

    async def unfollow(self, user_id: str) -> None:
        await self.request("DELETE", "/api/follows", json={"followingId": user_id})

    # Users

    async def get_user(self, user_id: str) -> dict:
        return await self.request("GET", f"/api/users/{user_id}")

    async def me(self) -> dict:
        return await self.request("GET", "/api/users/me")

    async def sync_user(self, name: Optional[str] = None) -> dict:
        payload = {"name": name} if name else None
        return await self.request("POST", "/api/users/sync", json=payload)
