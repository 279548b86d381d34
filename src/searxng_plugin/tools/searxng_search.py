"""SearXNG web search tool.

One invocation is one GET against ``{base_url}/search`` and one envelope back:
either a result set or an error message. Failures never escape ``execute``.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from searxng_plugin.config import ToolConfig
from searxng_plugin.errors import SearchRequestError
from searxng_plugin.logging import bind_context, clear_context
from searxng_plugin.tools.registry import ToolHost

logger = logging.getLogger(__name__)

TOOL_NAME = "searxng_search"
PROVIDER = "searxng"
MAX_COUNT = 20
OPTIONAL_PARAMS = ("categories", "language", "time_range")

TOOL_DESCRIPTION = (
    "Search the web via self-hosted SearXNG. Returns titles, URLs, and snippets. "
    "Privacy-preserving, aggregated results from 70+ engines. "
    "Use for web searches, especially when privacy matters or as an alternative to Brave."
)

TOOL_PARAMETERS: dict[str, object] = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "description": "Search query string."},
        "count": {
            "type": "number",
            "description": "Number of results (1-20, default 5).",
            "minimum": 1,
            "maximum": MAX_COUNT,
        },
        "categories": {
            "type": "string",
            "description": (
                "Comma-separated categories: general, images, news, videos, it, "
                "science, files, music, social media."
            ),
        },
        "language": {"type": "string", "description": "Language code (e.g. en, de, fr)."},
        "time_range": {"type": "string", "description": "Time range: day, week, month, year."},
    },
    "required": ["query"],
}


@dataclass(slots=True)
class SearchResult:
    title: str = ""
    url: str = ""
    description: str = ""
    published: str | None = None
    engines: str | None = None
    score: float | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "description": self.description,
        }
        for key in ("published", "engines", "score", "category"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(slots=True)
class SearchSuccess:
    query: str
    results: list[SearchResult] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "provider": PROVIDER,
            "count": self.count,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass(slots=True)
class SearchFailure:
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


SearchEnvelope = SearchSuccess | SearchFailure


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return _text(value)


def _engines(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(_text(engine) for engine in value)
    return None


def _score(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


def normalize_result(item: dict[str, Any]) -> SearchResult:
    """Map one upstream result object onto a SearchResult."""
    return SearchResult(
        title=_text(item.get("title")),
        url=_text(item.get("url")),
        description=_text(item.get("content")),
        published=_optional_text(item.get("publishedDate")),
        engines=_engines(item.get("engines")),
        score=_score(item.get("score")),
        category=_optional_text(item.get("category")),
    )


def build_search_params(query: str, args: dict[str, Any]) -> dict[str, str]:
    params = {"q": query, "format": "json"}
    for key in OPTIONAL_PARAMS:
        value = args.get(key)
        if value:
            params[key] = value
    return params


def parse_results(body: Any, limit: int) -> list[SearchResult]:
    if not isinstance(body, dict):
        raise SearchRequestError("response is not a JSON object", retryable=False)
    raw_results = body.get("results")
    if raw_results is None:
        return []
    if not isinstance(raw_results, list):
        raise SearchRequestError("unexpected response format from SearXNG", retryable=False)
    return [normalize_result(item) for item in raw_results[:limit] if isinstance(item, dict)]


def text_content(envelope: SearchEnvelope) -> dict[str, Any]:
    """Wrap an envelope as the single text content block hosts expect."""
    return {
        "content": [
            {"type": "text", "text": json.dumps(envelope.to_dict(), ensure_ascii=False)},
        ]
    }


class SearxngSearchTool:
    name = TOOL_NAME
    description = TOOL_DESCRIPTION

    def __init__(
        self,
        config: ToolConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    @property
    def parameters(self) -> dict[str, object]:
        return copy.deepcopy(TOOL_PARAMETERS)

    def register(self, host: ToolHost) -> None:
        host.register(self.name, self.description, self.handle, parameters=self.parameters)
        logger.debug("registered %s against %s", self.name, self.config.base_url)

    async def handle(self, args: dict[str, Any]) -> dict[str, Any]:
        return text_content(await self.execute(args))

    async def execute(self, args: dict[str, Any]) -> SearchEnvelope:
        query = args.get("query", "")
        count = args.get("count")
        if count is None:
            count = self.config.default_count

        bind_context(tool=self.name, query=query)
        try:
            limit = int(count)
            response = await self._fetch(build_search_params(query, args))
            if not response.is_success:
                return self._failure(
                    query,
                    f"SearXNG error ({response.status_code}): "
                    f"{_body_text(response) or response.reason_phrase}",
                )
            results = parse_results(response.json(), limit)
        except Exception as exc:
            return self._failure(query, f"SearXNG request failed: {str(exc) or 'Unknown error'}")
        finally:
            clear_context()

        return SearchSuccess(query=query, results=results)

    async def _fetch(self, params: dict[str, str]) -> httpx.Response:
        """Send the GET and read its body under one deadline.

        The body of an error status is read best-effort: a failed read leaves
        the response unread instead of raising.
        """
        url = f"{self.config.base_url}/search"
        try:
            async with asyncio.timeout(self.config.timeout_s):
                async with httpx.AsyncClient(
                    transport=self._transport,
                    timeout=self.config.timeout_s,
                ) as client:
                    request = client.build_request("GET", url, params=params)
                    response = await client.send(request, stream=True)
                    try:
                        if response.is_success:
                            await response.aread()
                        else:
                            await _read_error_body(response)
                    finally:
                        await response.aclose()
                    return response
        except TimeoutError as exc:
            raise SearchRequestError(
                f"request timed out after {self.config.timeout_ms}ms"
            ) from exc

    def _failure(self, query: str, message: str) -> SearchFailure:
        logger.warning("searxng search failed query=%r: %s", query, message)
        return SearchFailure(error=message)


async def _read_error_body(response: httpx.Response) -> None:
    try:
        await response.aread()
    except httpx.HTTPError:
        logger.debug("unreadable body on status %s", response.status_code, exc_info=True)


def _body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return ""
