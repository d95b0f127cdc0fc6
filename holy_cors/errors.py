"""
Errors raised along the request pipeline.

Every error is terminal for the request that raised it. The application
factory registers one handler that turns any ``ProxyError`` into a JSON
``{"error": ...}`` response with the status code carried by the exception.
"""


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidOriginHeader(ProxyError):
    status_code = 400

    def __init__(self):
        super().__init__("Invalid Origin header")


class OriginNotAllowed(ProxyError):
    status_code = 403

    def __init__(self, origin: str):
        super().__init__(
            f"Origin '{origin}' is not allowed. Use --allow-origin to add it."
        )
        self.origin = origin


class MalformedTarget(ProxyError):
    status_code = 400


class UnsupportedScheme(ProxyError):
    status_code = 400

    def __init__(self, scheme: str):
        super().__init__(
            f"Unsupported scheme: {scheme}. Only http and https are allowed."
        )
        self.scheme = scheme


class RequestBodyUnreadable(ProxyError):
    status_code = 400

    def __init__(self):
        super().__init__("Failed to read request body")


class UpstreamUnreachable(ProxyError):
    status_code = 502


class UpstreamProtocolError(ProxyError):
    status_code = 502


class WebSocketRelayUnsupported(ProxyError):
    status_code = 501

    def __init__(self):
        super().__init__(
            "WebSocket proxying requires connection hijacking. "
            "Use a direct WebSocket connection."
        )


class RequestBuildFailed(ProxyError):
    status_code = 500

    def __init__(self):
        super().__init__("Failed to build request")
