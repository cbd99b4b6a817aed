"""HTTP transport for the spreadsheet-backed record stores."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from fleetroster._constants import USER_AGENT
from fleetroster._redact import redact_payload
from fleetroster.config import RosterConfig, SourceEndpoint
from fleetroster.exceptions import SourceUnavailableError, WriteRejectedError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the ingestion and write paths.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: SourceEndpoint) -> Any:
        ...

    async def post_json(self, endpoint: SourceEndpoint, body: Mapping[str, Any]) -> Any:
        ...

    async def patch_json(self, endpoint: SourceEndpoint, path: str, body: Mapping[str, Any]) -> Any:
        ...


def record_path(key_label: str, key_value: str) -> str:
    """Path suffix addressing one record by its natural key column."""
    return f"/{quote(key_label, safe='')}/{quote(key_value, safe='')}"


class HttpTransport:
    """JSON-over-HTTP transport.

    Reads raise :class:`SourceUnavailableError`; writes raise
    :class:`WriteRejectedError`. Nothing is retried here.
    """

    def __init__(self, config: RosterConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self, *, with_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if with_body:
            headers["content-type"] = "application/json"
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    def _trace(self, direction: str, method: str, url: str, payload: Any) -> None:
        if self._config.api_trace_enabled:
            _logger.debug("%s %s %s %s", direction, method, url, redact_payload(payload))

    async def _send(self, method: str, url: str, body: Mapping[str, Any] | None) -> tuple[int, str]:
        data = json.dumps(body) if body is not None else None
        self._trace(">>", method, url, body)
        async with self._http.request(
            method,
            url,
            data=data,
            headers=self._headers(with_body=body is not None),
            timeout=self._timeout,
        ) as resp:
            # Store bodies are not always valid UTF-8.
            text = await resp.text(errors="replace")
            return resp.status, text

    async def get_json(self, endpoint: SourceEndpoint) -> Any:
        """GET the store's full record set."""
        url = endpoint.url
        _logger.debug("GET %s", url)
        try:
            status, text = await self._send("GET", url, None)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SourceUnavailableError(
                f"Request to {endpoint.source_id} failed: {str(exc) or type(exc).__name__}",
                source_id=endpoint.source_id,
                url=url,
            ) from exc

        if not 200 <= status < 300:
            raise SourceUnavailableError(
                f"HTTP {status} from {endpoint.source_id}: {text[:200]}",
                source_id=endpoint.source_id,
                status_code=status,
                url=url,
            )

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SourceUnavailableError(
                f"Invalid JSON from {endpoint.source_id}: {text[:200]}",
                source_id=endpoint.source_id,
                status_code=status,
                url=url,
            ) from exc

        self._trace("<<", "GET", url, result)
        return result

    async def _write(self, method: str, endpoint: SourceEndpoint, url: str, body: Mapping[str, Any]) -> Any:
        try:
            status, text = await self._send(method, url, body)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise WriteRejectedError(
                f"{method} to {endpoint.source_id} failed: {str(exc) or type(exc).__name__}",
                entity=endpoint.entity,
                url=url,
            ) from exc

        if not 200 <= status < 300:
            raise WriteRejectedError(
                f"HTTP {status} from {endpoint.source_id}: {text[:200]}",
                entity=endpoint.entity,
                status_code=status,
                url=url,
            )

        if not text.strip():
            return {}
        try:
            result = json.loads(text)
        except json.JSONDecodeError:
            # The write was accepted; an unreadable acknowledgement is not a rejection.
            _logger.debug("Non-JSON acknowledgement from %s: %s", endpoint.source_id, text[:64])
            return {}
        self._trace("<<", method, url, result)
        return result

    async def post_json(self, endpoint: SourceEndpoint, body: Mapping[str, Any]) -> Any:
        """Insert records into the store."""
        return await self._write("POST", endpoint, endpoint.url, body)

    async def patch_json(self, endpoint: SourceEndpoint, path: str, body: Mapping[str, Any]) -> Any:
        """Partially update the record addressed by *path*."""
        return await self._write("PATCH", endpoint, f"{endpoint.url.rstrip('/')}{path}", body)
