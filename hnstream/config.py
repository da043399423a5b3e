"""Upstream request configuration.

Environment variables:
    HN_API_BASE    default: https://hacker-news.firebaseio.com/v0/
    HTTP_TIMEOUT   default: 30.0 (seconds)
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from hnstream.errors import ConfigurationError

HN_API_BASE = "https://hacker-news.firebaseio.com/v0/"
HTTP_TIMEOUT = 30.0
JSON_HEADERS: Mapping[str, str] = MappingProxyType({"Accept": "application/json"})


@dataclass(frozen=True, slots=True)
class RequestConfig:
    base_url: str = HN_API_BASE
    headers: Mapping[str, str] = field(default_factory=lambda: JSON_HEADERS)
    timeout: float = HTTP_TIMEOUT

    def __post_init__(self) -> None:
        # Relative joins need the trailing slash
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    def list_url(self) -> str:
        return f"{self.base_url}newstories.json"

    def item_url(self, story_id) -> str:
        return f"{self.base_url}item/{story_id}.json"


DEFAULT_CONFIG = RequestConfig()


def get_config() -> RequestConfig:
    """Read configuration from environment variables."""
    raw_timeout = os.environ.get("HTTP_TIMEOUT", str(HTTP_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"HTTP_TIMEOUT must be a number, got {raw_timeout!r}") from None
    if timeout <= 0:
        raise ConfigurationError("HTTP_TIMEOUT must be greater than 0")
    return RequestConfig(
        base_url=os.environ.get("HN_API_BASE", HN_API_BASE),
        timeout=timeout,
    )
