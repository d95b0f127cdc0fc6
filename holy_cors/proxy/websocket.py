"""
WebSocket upgrade handling.

Relaying WebSocket traffic is not supported. The proxy only checks that the
target accepts a WebSocket handshake and then refuses the upgrade: 502 when
the handshake fails, 501 when it succeeds.
"""

import asyncio
import logging
from typing import Mapping, NoReturn

import websockets
from websockets.exceptions import WebSocketException

from holy_cors.errors import UpstreamUnreachable, WebSocketRelayUnsupported
from holy_cors.proxy.target import ResolvedTarget
from holy_cors.utils import redact_url
from holy_cors.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)

logger = logging.getLogger("uvicorn.error")


def is_websocket_upgrade(headers: Mapping[str, str]) -> bool:
    return headers.get("upgrade", "").lower() == "websocket"


async def probe_websocket(target: ResolvedTarget, *, timeout: float) -> NoReturn:
    ws_url = target.websocket_url
    logger.info(f"WebSocket upgrade requested for {redact_url(ws_url)}")
    logger.warning("WebSocket proxying is experimental")

    try:
        async with websockets.connect(ws_url, open_timeout=timeout):
            pass
    except (WebSocketException, OSError, asyncio.TimeoutError) as e:
        log_exception_with_details(logger, "[WebSocket] Handshake with target failed:", e)
        raise UpstreamUnreachable(
            f"Failed to connect to WebSocket: {format_exception_message(e)}"
        ) from e

    raise WebSocketRelayUnsupported()
