from .annotator import (
    CORS_METHODS,
    add_cors_headers,
    error_response,
    is_preflight,
    preflight_response,
    welcome_response,
)
from .origin_policy import evaluate_origin

__all__ = [
    "CORS_METHODS",
    "add_cors_headers",
    "error_response",
    "evaluate_origin",
    "is_preflight",
    "preflight_response",
    "welcome_response",
]
