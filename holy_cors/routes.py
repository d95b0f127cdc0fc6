import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, WebSocket
from fastapi.requests import HTTPConnection
from fastapi.responses import Response
from starlette.routing import Route

from holy_cors.config import Configuration
from holy_cors.cors import (
    error_response,
    evaluate_origin,
    is_preflight,
    preflight_response,
    welcome_response,
)
from holy_cors.errors import ProxyError
from holy_cors.proxy import (
    ResolvedTarget,
    forward_request,
    is_websocket_upgrade,
    probe_websocket,
    resolve_target,
)

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


def get_configuration(connection: HTTPConnection) -> Configuration:
    return connection.app.state.config


def request_path(connection: HTTPConnection) -> str:
    """The path exactly as the client sent it, before any percent-decoding."""
    raw_path = connection.scope.get("raw_path")
    if raw_path is None:
        return connection.url.path
    return raw_path.split(b"?", 1)[0].decode("utf-8", "surrogateescape")


def _resolve(connection: HTTPConnection) -> Optional[ResolvedTarget]:
    return resolve_target(request_path(connection), connection.url.query or None)


async def proxy_all(request: Request) -> Response:
    """
    Proxy pipeline: origin check, preflight, welcome page, target resolution,
    WebSocket refusal, then forwarding. Failures raise ``ProxyError`` and are
    rendered by the application's error handler.
    """
    logger.debug(f"Received request: {request.method} {request.url.path}")
    config = get_configuration(request)

    origin = evaluate_origin(request.headers, config)

    if is_preflight(request.method, request.headers):
        logger.debug("Handling preflight request")
        return preflight_response(origin, request.headers)

    target = _resolve(request)
    if target is None:
        return welcome_response()

    if is_websocket_upgrade(request.headers):
        await probe_websocket(target, timeout=config.timeout)

    return await forward_request(
        request,
        target,
        origin,
        timeout=config.timeout,
        ssl_context=request.app.state.ssl_context,
    )


async def _deny(websocket: WebSocket, response: Response) -> None:
    if "websocket.http.response" in (websocket.scope.get("extensions") or {}):
        await websocket.send_denial_response(response)
    else:
        await websocket.close(code=1011)


@router.websocket("/{path:path}")
async def proxy_websocket(
    websocket: WebSocket, config: Configuration = Depends(get_configuration)
):
    """Upgrades that reached the server as real WebSocket handshakes."""
    try:
        evaluate_origin(websocket.headers, config)
        target = _resolve(websocket)
        if target is None:
            await _deny(websocket, welcome_response())
            return
        await probe_websocket(target, timeout=config.timeout)
    except ProxyError as e:
        await _deny(websocket, error_response(e.status_code, e.message))


class _ProxyApp:
    """Plain ASGI endpoint, so the route is not bound to a list of methods."""

    async def __call__(self, scope, receive, send):
        response = await proxy_all(Request(scope, receive))
        await response(scope, receive, send)


_proxy_app = _ProxyApp()


def get_proxy_routes() -> list[Route]:
    """
    Catch-all HTTP route accepting any method, WebDAV verbs included.

    Added to the application's route list directly, after ``router``.
    """
    return [Route("/{path:path}", endpoint=_proxy_app)]
