import logging
import ssl
from typing import AsyncIterator, List, Mapping, Tuple

import httpx
from fastapi import Request
from fastapi.responses import StreamingResponse
from opentelemetry import trace
from starlette.requests import ClientDisconnect

from holy_cors.cors import add_cors_headers
from holy_cors.errors import (
    MalformedTarget,
    RequestBodyUnreadable,
    RequestBuildFailed,
    UpstreamProtocolError,
    UpstreamUnreachable,
)
from holy_cors.proxy.headers import (
    SKIP_RESPONSE_HEADERS,
    filter_headers,
    prepare_headers,
)
from holy_cors.proxy.target import ResolvedTarget
from holy_cors.utils import redact_url
from holy_cors.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)
from holy_cors.utils.traced_requests import traced_request

tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")


def _encode_headers(headers: List[Tuple[str, str]]) -> List[Tuple[bytes, bytes]]:
    # Starlette decodes header bytes as latin-1; hand httpx the original bytes.
    return [(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers]


async def read_body(request: Request) -> bytes:
    """Buffer the whole inbound body. There is no streaming upload."""
    try:
        return await request.body()
    except ClientDisconnect as e:
        logger.error(f"Failed to read request body: {format_exception_message(e)}")
        raise RequestBodyUnreadable() from e


async def relay_body(
    upstream: httpx.Response, client: httpx.AsyncClient
) -> AsyncIterator[bytes]:
    """
    Stream the (decoded) upstream body to the client.

    The upstream response and its client are closed on every exit path,
    including cancellation when the inbound client goes away.
    """
    try:
        async for chunk in upstream.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        log_exception_with_details(logger, "[Proxy] Relay interrupted:", e)
        raise
    finally:
        await upstream.aclose()
        await client.aclose()


def build_response(
    upstream: httpx.Response,
    client: httpx.AsyncClient,
    origin: str,
    request_headers: Mapping[str, str],
) -> StreamingResponse:
    response = StreamingResponse(
        relay_body(upstream, client), status_code=upstream.status_code
    )
    for name, value in filter_headers(
        upstream.headers.multi_items(), SKIP_RESPONSE_HEADERS
    ):
        response.headers.append(name, value)
    add_cors_headers(response.headers, origin, request_headers)
    return response


async def forward_request(
    request: Request,
    target: ResolvedTarget,
    origin: str,
    *,
    timeout: float,
    ssl_context: ssl.SSLContext,
) -> StreamingResponse:
    """
    Replay the inbound request against the target and relay its response.

    - Hop-by-hop headers are dropped, Host is set to the target
    - Redirects are passed through to the client, not followed
    - Connection failures are not retried
    """
    body = await read_body(request)
    target_url = redact_url(target.url)

    with traced_request(
        tracer,
        "proxy_request",
        f"Proxying {request.method} {request.url.path} -> {target_url}",
        {"proxy.method": request.method, "proxy.target_url": target_url},
    ) as span:
        client = httpx.AsyncClient(
            http2=True,
            verify=ssl_context,
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )
        try:
            outbound = client.build_request(
                request.method,
                target.url,
                headers=_encode_headers(prepare_headers(request.headers.items(), target)),
                content=body,
            )
            upstream = await client.send(outbound, stream=True)

        except httpx.InvalidURL as e:
            await client.aclose()
            span.set_attribute("proxy.error", "invalid_url")
            raise MalformedTarget(
                f"Invalid target URI: {format_exception_message(e)}"
            ) from e

        except httpx.ProtocolError as e:
            await client.aclose()
            log_exception_with_details(logger, f"[Proxy] {target_url}:", e)
            span.set_attribute("proxy.error", "protocol_error")
            raise UpstreamProtocolError(
                f"Invalid response from target: {format_exception_message(e)}"
            ) from e

        except httpx.HTTPError as e:
            await client.aclose()
            log_exception_with_details(logger, f"[Proxy] {target_url}:", e)
            span.set_attribute("proxy.error", "connection_failed")
            raise UpstreamUnreachable(
                f"Failed to reach target: {format_exception_message(e)}"
            ) from e

        except (UnicodeEncodeError, ValueError) as e:
            await client.aclose()
            logger.error(f"Failed to build proxy request for {target_url}: {e}")
            span.set_attribute("proxy.error", "build_failed")
            raise RequestBuildFailed() from e

        except Exception:
            await client.aclose()
            raise

        span.set_attribute("proxy.status_code", upstream.status_code)

        try:
            return build_response(upstream, client, origin, request.headers)
        except ValueError as e:
            await upstream.aclose()
            await client.aclose()
            logger.error(f"Invalid response headers from {target_url}: {e}")
            span.set_attribute("proxy.error", "invalid_response")
            raise UpstreamProtocolError(
                f"Invalid response from target: {format_exception_message(e)}"
            ) from e

        except Exception:
            await upstream.aclose()
            await client.aclose()
            raise
