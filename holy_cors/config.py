from dataclasses import dataclass
from functools import cached_property
from typing import FrozenSet, Tuple

from holy_cors import vars as env

# Always allowed, whatever else is configured
DEFAULT_ORIGINS: Tuple[str, ...] = (
    "https://bugdays.com",
    "https://www.bugdays.com",
    "http://bugdays.com",
    "http://www.bugdays.com",
)


@dataclass(frozen=True)
class Configuration:
    """
    Process-wide proxy settings.

    Built once at startup and shared by reference with every request handler.
    There is no write path after construction.
    """

    bind: str = "0.0.0.0"
    port: int = 8080
    allow_origins: Tuple[str, ...] = ()
    allow_all: bool = False
    verbose: bool = False
    timeout: float = 60.0

    @cached_property
    def _allowed(self) -> FrozenSet[str]:
        return frozenset(DEFAULT_ORIGINS) | frozenset(self.allow_origins)

    def allowed_origins(self) -> FrozenSet[str]:
        """Built-in defaults plus the configured extra origins."""
        return self._allowed

    def is_origin_allowed(self, origin: str) -> bool:
        if self.allow_all:
            return True
        return origin in self._allowed

    @property
    def socket_addr(self) -> str:
        return f"{self.bind}:{self.port}"

    @classmethod
    def from_env(cls) -> "Configuration":
        return cls(
            bind=env.HOLY_CORS_BIND,
            port=env.HOLY_CORS_PORT,
            allow_origins=tuple(env.HOLY_CORS_ORIGINS),
            allow_all=env.HOLY_CORS_ALLOW_ALL,
            verbose=env.HOLY_CORS_VERBOSE,
            timeout=env.PROXY_TIMEOUT,
        )
