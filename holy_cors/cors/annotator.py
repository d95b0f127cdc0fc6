from typing import Mapping

from fastapi.responses import JSONResponse, Response
from starlette.datastructures import MutableHeaders

CORS_METHODS = "GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS"
CORS_MAX_AGE = "86400"

WELCOME_MESSAGE = "Holy CORS! Proxy is running. Usage: /{TARGET_URL}"


def is_preflight(method: str, headers: Mapping[str, str]) -> bool:
    """A preflight is an OPTIONS request that names the method it wants to use."""
    return method.upper() == "OPTIONS" and "access-control-request-method" in headers


def add_cors_headers(
    headers: MutableHeaders, origin: str, request_headers: Mapping[str, str]
) -> None:
    """
    Stamp the full CORS header set onto a response, replacing existing values.

    An empty origin means the caller sent no Origin header and gets ``*``.
    """
    headers["access-control-allow-origin"] = origin or "*"
    headers["access-control-allow-methods"] = CORS_METHODS
    headers["access-control-allow-headers"] = request_headers.get(
        "access-control-request-headers", "*"
    )
    headers["access-control-expose-headers"] = "*"
    headers["access-control-max-age"] = CORS_MAX_AGE
    headers["access-control-allow-credentials"] = "true"


def preflight_response(origin: str, request_headers: Mapping[str, str]) -> Response:
    response = Response(status_code=204)
    add_cors_headers(response.headers, origin, request_headers)
    return response


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        {"error": message},
        status_code=status_code,
        headers={
            "access-control-allow-origin": "*",
            "access-control-allow-methods": CORS_METHODS,
        },
    )


def welcome_response() -> JSONResponse:
    return JSONResponse(
        {"message": WELCOME_MESSAGE},
        headers={"access-control-allow-origin": "*"},
    )
