"""
Extraction of the destination URL embedded in the proxy request path.

``/https://api.example.com/users?page=2`` proxies to
``https://api.example.com/users?page=2``. The embedded URL may also be
percent-encoded as a whole, or given as a bare domain in which case https is
assumed.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

import httpx

from holy_cors.errors import MalformedTarget, UnsupportedScheme

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ResolvedTarget:
    url: str
    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: Optional[str]

    @property
    def host_header(self) -> str:
        """Value for the outbound Host header, with the port only when non-default."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is not None and self.port != DEFAULT_PORTS[self.scheme]:
            return f"{host}:{self.port}"
        return host

    @property
    def websocket_url(self) -> str:
        ws_scheme = "wss" if self.scheme == "https" else "ws"
        return ws_scheme + self.url[len(self.scheme):]


def percent_decode(value: str) -> str:
    """
    Lenient percent-decoding that never fails.

    ``%XX`` with two hex digits becomes that byte. A ``%`` followed by anything
    else is emitted verbatim together with the (up to two) characters read
    after it, and those characters are not scanned again.
    """
    out = bytearray()
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "%":
            pair = value[i + 1 : i + 3]
            if len(pair) == 2 and all(c in _HEX_DIGITS for c in pair):
                out.append(int(pair, 16))
            else:
                out += ("%" + pair).encode("utf-8", "surrogateescape")
            i += 1 + len(pair)
            continue
        out += ch.encode("utf-8", "surrogateescape")
        i += 1

    try:
        return out.decode("utf-8")
    except UnicodeDecodeError:
        return out.decode("latin-1")


def extract_target_url(path: str, query: Optional[str] = None) -> Optional[str]:
    """
    Turn the inbound request path (and query) into a target URL string.

    Returns None when there is no target at all or when the path does not
    look like a URL or domain; ``resolve_target`` tells the two apart.
    """
    if path.startswith("/"):
        path = path[1:]
    if not path:
        return None

    url = percent_decode(path)
    if query:
        url = f"{url}?{query}"

    if url.startswith("http://") or url.startswith("https://"):
        return url
    # Bare domain
    if "." in url and " " not in url:
        return f"https://{url}"
    return None


def parse_target(url: str) -> ResolvedTarget:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise MalformedTarget(f"Invalid URL: {e}") from e

    if parts.scheme not in ALLOWED_SCHEMES:
        raise UnsupportedScheme(parts.scheme)
    if not parts.hostname:
        raise MalformedTarget("Invalid URL: empty host")

    try:
        # Internationalised names become their IDNA (punycode) form
        host = httpx.URL(url).raw_host.decode("ascii")
    except httpx.InvalidURL as e:
        raise MalformedTarget(f"Invalid URL: {e}") from e

    return ResolvedTarget(
        url=url,
        scheme=parts.scheme,
        host=host,
        port=port,
        path=parts.path or "/",
        query=parts.query or None,
    )


def resolve_target(path: str, query: Optional[str] = None) -> Optional[ResolvedTarget]:
    """
    Resolve the request path to a validated target.

    None means the request addressed the proxy itself (``/`` or empty path).
    """
    if path in ("", "/"):
        return None

    url = extract_target_url(path, query)
    if url is None:
        raise MalformedTarget("Invalid target URL")
    return parse_target(url)
