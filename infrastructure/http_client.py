"""Outbound HTTP for provider calls (currently only the email API)."""

from typing import Any, Optional

import httpx


class HttpClient:
    """Async httpx client shared by outbound provider calls.

    Created in the app lifespan and closed on shutdown. Every request carries
    a User-Agent naming the service.
    """

    def __init__(self, timeout: float = 5.0, user_agent: str = "mailgate") -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": user_agent},
        )

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        return await self._client.post(url, json=payload, headers=headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
