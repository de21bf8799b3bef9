"""HTTP gateway transport for the node's CasperService."""
from __future__ import annotations

import asyncio
import json
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import NodeConfig
from ..errors import StatusCode, to_status_code
from ..interfaces.transport import OnEnd, OnMessage, UnaryResult

logger = logging.getLogger(__name__)

SERVICE_NAME = "io.casperlabs.node.api.casper.CasperService"

# Fallback when an error body carries no gRPC code.
_HTTP_TO_STATUS: dict[int, StatusCode] = {
    400: StatusCode.INVALID_ARGUMENT,
    401: StatusCode.UNAUTHENTICATED,
    403: StatusCode.PERMISSION_DENIED,
    404: StatusCode.NOT_FOUND,
    409: StatusCode.ABORTED,
    429: StatusCode.RESOURCE_EXHAUSTED,
    501: StatusCode.UNIMPLEMENTED,
    503: StatusCode.UNAVAILABLE,
    504: StatusCode.DEADLINE_EXCEEDED,
}

_CALL_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError)


def _status_from_body(body: Any, http_status: int) -> tuple[StatusCode, str]:
    """Read ``{"code", "message"}`` from an error body."""
    if isinstance(body, dict):
        code = body.get("code", body.get("grpc_code"))
        if isinstance(code, int):
            return to_status_code(code), str(body.get("message", ""))
    status = _HTTP_TO_STATUS.get(http_status, StatusCode.UNKNOWN)
    message = body.get("message", "") if isinstance(body, dict) else str(body or "")
    return status, message or f"HTTP {http_status}"


class GatewayTransport:
    """Calls node methods through its JSON/HTTP gateway.

    Every call opens its own session, so concurrent calls share nothing
    but the configured address.
    """

    def __init__(self, config: NodeConfig) -> None:
        self.url = config.url.rstrip("/")
        self.timeout = config.timeout

    def _endpoint(self, method: str) -> str:
        return f"{self.url}/{SERVICE_NAME}/{method}"

    def _connector(self) -> aiohttp.TCPConnector:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        return aiohttp.TCPConnector(ssl=ssl_context)

    async def unary(self, method: str, request: dict[str, Any]) -> UnaryResult:
        """Make a single request/response call."""
        try:
            async with aiohttp.ClientSession(connector=self._connector()) as session:
                async with session.post(
                    self._endpoint(method),
                    json=request,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    body = await response.json(content_type=None)
                    if response.status == 200:
                        return UnaryResult(StatusCode.OK, "", body or {})
                    status, message = _status_from_body(body, response.status)
        except _CALL_ERRORS as e:
            logger.warning("Call %s failed: %s", method, e)
            return UnaryResult(StatusCode.UNAVAILABLE, str(e))

        logger.debug("Call %s returned %s: %s", method, status.name, message)
        return UnaryResult(status, message)

    async def invoke(
        self,
        method: str,
        request: dict[str, Any],
        on_message: OnMessage,
        on_end: OnEnd,
    ) -> None:
        """Run a server-streaming call.

        The gateway writes one JSON object per line: ``{"result": ...}`` for
        messages, ``{"error": ...}`` to terminate with a failure.
        """
        code, message = StatusCode.OK, ""
        count = 0
        try:
            async with aiohttp.ClientSession(connector=self._connector()) as session:
                async with session.post(
                    self._endpoint(method),
                    json=request,
                    timeout=aiohttp.ClientTimeout(total=None, sock_read=self.timeout),
                ) as response:
                    if response.status != 200:
                        body = await response.json(content_type=None)
                        code, message = _status_from_body(body, response.status)
                    else:
                        async for line in response.content:
                            line = line.strip()
                            if not line:
                                continue
                            chunk = json.loads(line)
                            if "error" in chunk:
                                code, message = _status_from_body(chunk["error"], 500)
                                break
                            count += 1
                            on_message(chunk.get("result", {}))
        except _CALL_ERRORS as e:
            logger.warning("Stream %s failed after %d messages: %s", method, count, e)
            code, message = StatusCode.UNAVAILABLE, str(e)

        logger.debug("Stream %s ended with %s after %d messages", method, code.name, count)
        on_end(code, message)
