"""Shared async HTTP plumbing for the vendor cost APIs.

Both vendors page their cost data the same way: each response carries
``data``, ``has_more`` and ``next_page``; the next request repeats the query
with ``page=<next_page>``. Pages are fetched one at a time and never retried.
"""

from typing import Any

import httpx

from usage_report.exceptions import AuthenticationError, ProviderAPIError
from usage_report.logging import get_logger
from usage_report.models import CostBucket, CostPage

log = get_logger("usage_report.providers.base")

DEFAULT_TIMEOUT = 30.0


class CostAPIClient:
    """Base class for a paginated vendor cost endpoint.

    Subclasses set ``provider``, ``base_url`` and ``path``, and implement
    ``_headers``, ``_query_params`` and ``_parse_bucket``.
    """

    provider: str = ""
    base_url: str = ""
    path: str = ""

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Vendor admin API key.
            timeout: Request timeout in seconds.
            client: Optional shared httpx client. An injected client is
                never closed by this object.
        """
        self._api_key = api_key
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this object created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CostAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        raise NotImplementedError

    def _query_params(self) -> dict[str, Any]:
        raise NotImplementedError

    def _parse_bucket(self, data: dict[str, Any]) -> CostBucket:
        raise NotImplementedError

    async def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        """Issue one GET against the cost endpoint.

        Raises:
            AuthenticationError: The vendor rejected the key.
            ProviderAPIError: Transport failure or any other error status.
        """
        client = await self._get_client()
        url = f"{self.base_url}{self.path}"

        try:
            response = await client.get(url, params=params, headers=self._headers())
        except httpx.RequestError as e:
            log.error("cost_request_failed", provider=self.provider, error=str(e))
            raise ProviderAPIError(f"Request failed: {e}", provider=self.provider) from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"{self.provider} rejected the admin API key (HTTP {response.status_code})",
                provider=self.provider,
                status_code=response.status_code,
                response=_error_payload(response),
            )

        if response.status_code >= 400:
            payload = _error_payload(response)
            raise ProviderAPIError(
                _error_message(payload, response.status_code),
                provider=self.provider,
                status_code=response.status_code,
                response=payload,
            )

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise ProviderAPIError(
                "Response body is not valid JSON",
                provider=self.provider,
                status_code=response.status_code,
            ) from e
        return data

    async def fetch_page(self, page: str | None = None) -> CostPage:
        """Fetch and decode a single page.

        Args:
            page: Cursor from the previous page's ``next_page``.
        """
        params = self._query_params()
        if page:
            params["page"] = page

        data = await self._request(params)
        buckets = [self._parse_bucket(b) for b in data.get("data", [])]
        return CostPage(
            buckets=buckets,
            has_more=bool(data.get("has_more", False)),
            next_page=data.get("next_page"),
        )

    async def fetch_costs(self) -> list[CostBucket]:
        """Fetch every page and return all buckets in order."""
        log.info("cost_fetch_started", provider=self.provider)
        all_buckets: list[CostBucket] = []
        next_page: str | None = None
        pages = 0

        while True:
            page = await self.fetch_page(next_page)
            pages += 1
            all_buckets.extend(page.buckets)
            log.debug(
                "cost_page_fetched",
                provider=self.provider,
                page=pages,
                buckets=len(page.buckets),
                has_more=page.has_more,
            )
            next_page = page.next_page if page.has_more else None
            if not next_page:
                break

        log.info(
            "cost_fetch_completed",
            provider=self.provider,
            pages=pages,
            buckets=len(all_buckets),
        )
        return all_buckets


def _error_payload(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {"message": response.text}
    return data if isinstance(data, dict) else {"message": response.text}


def _error_message(payload: dict[str, Any], status_code: int) -> str:
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if payload.get("message"):
        return str(payload["message"])
    return f"HTTP {status_code}"
