from __future__ import annotations

import logging
import typing as t

import httpx
from mcp.types import TextResourceContents

from mcp_bridge.core.errors import UpstreamError, UpstreamPayloadError
from mcp_bridge.core.models import CapabilityDescriptor, CapabilityResult
from mcp_bridge.core.session import Session
from mcp_bridge.utils.config import UpstreamConfig

logger = logging.getLogger(__name__)

ITEM_SEPARATOR = "\n---\n"


class CategoriesProvider:
    """Readable resource summarizing the categories served by the upstream API.

    Each provider owns its own HTTP client and is meant to live for a single
    session; the client is closed through the session's close callbacks.
    """

    def __init__(
        self,
        config: t.Optional[UpstreamConfig] = None,
        *,
        transport: t.Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or UpstreamConfig()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout_seconds),
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self.descriptor = CapabilityDescriptor(
            name=self._config.resource_uri,
            mime_type="text/plain",
            title="Categories",
            description="Name and string identifier of every upstream category",
        )

    def attach(self, session: Session) -> None:
        session.register(self.descriptor, self._read, on_close=self.aclose)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_summary(self) -> CapabilityResult:
        payload = await self._fetch()
        items = _extract_items(payload, self._config.list_field)
        text = ITEM_SEPARATOR.join(_render_item(item) for item in items)
        return [
            TextResourceContents(
                uri=self.descriptor.name,
                mimeType=self.descriptor.mime_type,
                text=text,
            )
        ]

    async def _read(self, params: t.Dict[str, t.Any]) -> CapabilityResult:
        return await self.fetch_summary()

    async def _fetch(self) -> t.Any:
        url = self._config.url
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Timed out fetching categories from {url}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Failed to fetch categories from {url}: {exc}") from exc

        logger.info("Categories: upstream GET %s -> %d", url, response.status_code)
        if not response.is_success:
            raise UpstreamError(f"Failed to fetch categories: {response.status_code} {response.reason_phrase}")

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamPayloadError("Upstream categories response is not valid JSON") from exc


def _extract_items(payload: t.Any, list_field: str) -> t.List[t.Dict[str, t.Any]]:
    if not isinstance(payload, dict) or list_field not in payload:
        raise UpstreamPayloadError(f"Upstream categories response has no '{list_field}' field")
    items = payload[list_field]
    if not isinstance(items, list):
        raise UpstreamPayloadError(f"Upstream field '{list_field}' is not a list")
    for index, item in enumerate(items):
        if not isinstance(item, dict) or "name" not in item or "string_identifier" not in item:
            raise UpstreamPayloadError(f"Upstream category #{index} lacks 'name' or 'string_identifier'")
    return items


def _render_item(item: t.Dict[str, t.Any]) -> str:
    return f"Name: {item['name']}\nString identifier: {item['string_identifier']}"
