"""
Notion REST content source for blockrender.

Fetches pages and their block trees through the public Notion API. Every list
endpoint is paginated; a failed request is retried a bounded number of times
on the same cursor before the fetch is aborted.
"""

import logging
import os
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import tenacity

from ..config import config
from ..models import Block, Page
from .base import BaseSource, ContentAuthError, ContentFetchError


# Transport failures, 429/5xx responses and unreadable JSON bodies
RETRYABLE_ERRORS = (httpx.RequestError, httpx.HTTPStatusError, ValueError)


class NotionSource(BaseSource):
    """
    Content source backed by the Notion API.
    """

    def __init__(self, token: Optional[str] = None, api_base: Optional[str] = None,
                 api_version: Optional[str] = None, page_size: Optional[int] = None,
                 max_retries: Optional[int] = None, retry_backoff: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the Notion source.

        Args:
            token: Integration token (defaults to the env var named in config)
            api_base: API root URL (defaults to config value)
            api_version: Value of the Notion-Version header (defaults to config value)
            page_size: Items requested per page (defaults to config value)
            max_retries: Retries per request before giving up (defaults to config value)
            retry_backoff: Base delay in seconds between retries (defaults to config value)
            client: Optional pre-built httpx.AsyncClient
        """
        self.token = token if token is not None else os.getenv(config.notion_token_env, "")
        self.api_base = (api_base or config.notion_api_base).rstrip("/")
        self.api_version = api_version or config.notion_api_version
        self.page_size = page_size or config.notion_page_size
        self.max_retries = max_retries if max_retries is not None else config.notion_max_retries
        self.retry_backoff = retry_backoff if retry_backoff is not None else config.notion_retry_backoff
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.notion_timeout)

        logging.info(f"Initialized Notion source for: {self.api_base}")

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.api_version,
            "Content-Type": "application/json",
        }

    async def _send(self, method: str, url: str, params: Optional[Dict[str, Any]],
                    json: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        response = await self.client.request(method, url, params=params, json=json, headers=self._headers())
        if response.status_code in (401, 403):
            raise ContentAuthError(f"HTTP {response.status_code}: unauthorized for {url}")
        if response.status_code != 429 and 400 <= response.status_code < 500:
            raise ContentFetchError(
                f"HTTP {response.status_code} for {url}: {response.text[:200]}",
                status_code=response.status_code,
            )
        response.raise_for_status()
        return response.json()

    async def _request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                       json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make one API request, retrying transient failures.

        Connection errors, 429 and 5xx responses (and unreadable JSON bodies)
        are retried up to ``max_retries`` times with a linear backoff; anything
        else fails immediately.

        Raises:
            ContentAuthError: On 401/403
            ContentFetchError: When the request cannot be completed
        """
        url = f"{self.api_base}{path}"
        retrying = tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self.max_retries + 1),
            wait=tenacity.wait_incrementing(start=self.retry_backoff, increment=self.retry_backoff),
            retry=tenacity.retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=lambda retry_state: logging.warning(
                f"{method} {url} failed (attempt {retry_state.attempt_number}/{self.max_retries + 1}): "
                f"{retry_state.outcome.exception() if retry_state.outcome else 'unknown'}. Retrying"
            ),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._send(method, url, params, json)
        except RETRYABLE_ERRORS as e:
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            attempts = retrying.statistics.get("attempt_number", self.max_retries + 1)
            raise ContentFetchError(
                f"{method} {url} failed after {attempts} attempts: {e}",
                status_code=status_code,
            ) from e
        raise ContentFetchError(f"{method} {url} returned no response")

    async def _paginate(self, method: str, path: str) -> AsyncIterator[Dict[str, Any]]:
        """Yield every result of a paginated list endpoint."""
        start_cursor: Optional[str] = None
        has_more = True

        while has_more:
            if method == "GET":
                params: Dict[str, Any] = {"page_size": self.page_size}
                if start_cursor:
                    params["start_cursor"] = start_cursor
                data = await self._request(method, path, params=params)
            else:
                body: Dict[str, Any] = {"page_size": self.page_size}
                if start_cursor:
                    body["start_cursor"] = start_cursor
                data = await self._request(method, path, json=body)

            for result in data.get("results") or []:
                yield result

            start_cursor = data.get("next_cursor")
            has_more = bool(data.get("has_more")) and bool(start_cursor)

    async def _get_raw_blocks(self, block_id: str) -> List[Dict[str, Any]]:
        raw_blocks = []
        async for raw in self._paginate("GET", f"/blocks/{block_id}/children"):
            if raw.get("has_children"):
                raw["children"] = await self._get_raw_blocks(raw["id"])
            raw_blocks.append(raw)
        return raw_blocks

    async def get_blocks(self, block_id: str) -> List[Block]:
        logging.info(f"Loading blocks of {block_id}...")
        raw_blocks = await self._get_raw_blocks(block_id)
        return [Block.from_api(raw) for raw in raw_blocks]

    async def get_page(self, page_id: str) -> Page:
        logging.info(f"Loading page {page_id}...")
        data = await self._request("GET", f"/pages/{page_id}")
        children = await self.get_blocks(page_id)
        return Page.from_api(data, children=children)

    async def get_pages(self, database_id: str) -> List[Page]:
        logging.info(f"Querying database {database_id}...")
        pages = []
        async for data in self._paginate("POST", f"/databases/{database_id}/query"):
            children = await self.get_blocks(data["id"])
            pages.append(Page.from_api(data, children=children))

        logging.info(f"Successfully loaded {len(pages)} pages.")
        return pages
