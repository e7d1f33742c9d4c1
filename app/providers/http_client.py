"""
Shared async HTTP access for provider adapters.

Every adapter talks to its backend through HttpClient so transport failures
surface the same way: a ProviderError carrying the HTTP status when there is
one. Callers never see httpx exceptions.
"""

import logging
from typing import Any

import httpx

from app.config import settings
from app.providers.base import ProviderError

logger = logging.getLogger(__name__)

ERROR_BODY_PREVIEW_CHARS = 300


class HttpClient:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._client = client
        self._timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._user_agent = user_agent or settings.http_user_agent

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
                follow_redirects=True,
            )
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self.client.request(
                method, url, params=params, json=json_body, headers=headers
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"HTTP error calling {url}: {e}") from e

        if not response.is_success:
            preview = response.text[:ERROR_BODY_PREVIEW_CHARS]
            raise ProviderError(
                f"HTTP {response.status_code} from {response.url.host}: {preview}",
                status_code=response.status_code,
            )
        return response

    async def get_json(
        self, url: str, *, params: Any = None, headers: dict[str, str] | None = None
    ) -> Any:
        response = await self._request("GET", url, params=params, headers=headers)
        return self._decode_json(response)

    async def post_json(
        self, url: str, body: Any, *, headers: dict[str, str] | None = None
    ) -> Any:
        response = await self._request("POST", url, json_body=body, headers=headers)
        return self._decode_json(response)

    async def get_text(
        self, url: str, *, params: Any = None, headers: dict[str, str] | None = None
    ) -> str:
        response = await self._request("GET", url, params=params, headers=headers)
        return response.text

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            preview = response.text[:ERROR_BODY_PREVIEW_CHARS]
            raise ProviderError(f"JSON parse error: {e}. Body: {preview}") from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
