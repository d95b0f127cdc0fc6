from .forwarder import forward_request
from .target import ResolvedTarget, resolve_target
from .websocket import is_websocket_upgrade, probe_websocket

__all__ = [
    "ResolvedTarget",
    "forward_request",
    "is_websocket_upgrade",
    "probe_websocket",
    "resolve_target",
]
