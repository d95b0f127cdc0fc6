import logging
from typing import Mapping

from holy_cors.config import Configuration
from holy_cors.errors import InvalidOriginHeader, OriginNotAllowed

logger = logging.getLogger("uvicorn.error")


def _is_visible_ascii(value: str) -> bool:
    return all(ch == "\t" or 32 <= ord(ch) < 127 for ch in value)


def evaluate_origin(headers: Mapping[str, str], config: Configuration) -> str:
    """
    Validate the caller's Origin header against the configuration.

    Returns the origin to echo back, or an empty string when the request
    carries no Origin at all (curl, server-to-server calls and the like).
    Matching is exact: no wildcards, no scheme or case normalisation.
    """
    origin = headers.get("origin")
    if origin is None:
        return ""

    if not _is_visible_ascii(origin):
        raise InvalidOriginHeader()

    if not config.is_origin_allowed(origin):
        logger.warning(f"Rejected request from origin {origin!r}")
        raise OriginNotAllowed(origin)

    return origin
