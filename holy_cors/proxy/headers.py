from typing import FrozenSet, Iterable, List, Tuple

from holy_cors.proxy.target import ResolvedTarget

# Hop-by-hop and session headers that must not be replayed to the target
HOP_BY_HOP_HEADERS: FrozenSet[str] = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
    }
)

# Framing headers invalidated by relaying a decoded body
SKIP_RESPONSE_HEADERS: FrozenSet[str] = frozenset(
    {
        "connection",
        "keep-alive",
        "transfer-encoding",
        "content-encoding",
        "content-length",
    }
)


def filter_headers(
    headers: Iterable[Tuple[str, str]], excluded: FrozenSet[str]
) -> List[Tuple[str, str]]:
    """
    Drop excluded headers by case-insensitive name.

    Order and repeated headers are kept as given.
    """
    return [(name, value) for name, value in headers if name.lower() not in excluded]


def prepare_headers(
    headers: Iterable[Tuple[str, str]], target: ResolvedTarget
) -> List[Tuple[str, str]]:
    """Headers for the outbound request, with Host pointed at the target."""
    forwarded = filter_headers(headers, HOP_BY_HOP_HEADERS)
    forwarded.append(("host", target.host_header))
    return forwarded
