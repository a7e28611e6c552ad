"""
Remote source configuration.

Values come from the environment first and the persisted settings store
second. Only the site root is stored; the REST path is appended by the
API client.
"""

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Tuple

from media_bridge.core.dto.size import DEFAULT_SIZE_NAMES
from media_bridge.core.query import DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)

ENV_DOMAIN = "MEDIA_BRIDGE_DOMAIN"
ENV_TOKEN = "MEDIA_BRIDGE_TOKEN"
ENV_AUTH_SCHEME = "MEDIA_BRIDGE_AUTH_SCHEME"

KEY_DOMAIN = "source_domain"
KEY_TOKEN = "source_token"
KEY_AUTH_SCHEME = "source_auth_scheme"
KEY_PER_PAGE = "per_page_default"
KEY_LIST_TIMEOUT = "list_timeout"
KEY_UPLOAD_TIMEOUT = "upload_timeout"
KEY_PROBE_TIMEOUT = "probe_timeout"
KEY_PROBE_CONCURRENCY = "probe_concurrency"
KEY_SIZE_NAMES = "size_names"

AUTH_SCHEMES = ("Basic", "Bearer")

_API_SUFFIX = re.compile(r"/wp-json(?:/.*)?$", re.IGNORECASE)


class SettingsStore(Protocol):
    def get_config(self, key: str, default: Any = None) -> Any:
        ...


@dataclass(frozen=True)
class SourceSettings:
    base_url: str
    auth_token: Optional[str] = None
    auth_scheme: str = "Basic"
    per_page_default: int = DEFAULT_PER_PAGE
    list_timeout: float = 30
    upload_timeout: float = 3600
    probe_timeout: float = 10
    probe_concurrency: int = 8
    size_names: Tuple[str, ...] = field(default=DEFAULT_SIZE_NAMES)


def sanitize_base_url(url: Optional[str]) -> str:
    """
    Normalize a configured domain to the site root.

    ``https://example.com/wp-json/wp/v2/media/`` and ``https://example.com/``
    both become ``https://example.com``.
    """
    value = (url or "").strip()
    value = _API_SUFFIX.sub("", value.rstrip("/")).rstrip("/")
    if not value:
        raise ValueError("Media source domain is not configured")
    return value


def _normalize_scheme(value: Optional[str]) -> str:
    if not value:
        return "Basic"
    for scheme in AUTH_SCHEMES:
        if value.strip().lower() == scheme.lower():
            return scheme
    logger.warning(f"Unknown auth scheme '{value}', using Basic")
    return "Basic"


def _number(raw: Any, default, cast):
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring invalid setting value {raw!r}")
        return default
    return value if 0 < value < math.inf else default


def _size_names(raw: Any) -> Tuple[str, ...]:
    if not raw:
        return DEFAULT_SIZE_NAMES
    names = tuple(n.strip() for n in str(raw).split(",") if n.strip())
    return names or DEFAULT_SIZE_NAMES


def load_settings(
    store: Optional[SettingsStore] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SourceSettings:
    """
    Build SourceSettings from the environment and an optional settings store.

    Raises ValueError when no domain is configured anywhere.
    """
    env = os.environ if env is None else env

    def stored(key: str) -> Any:
        if store is None:
            return None
        return store.get_config(key)

    domain = env.get(ENV_DOMAIN) or stored(KEY_DOMAIN)
    token = env.get(ENV_TOKEN) or stored(KEY_TOKEN)
    scheme = env.get(ENV_AUTH_SCHEME) or stored(KEY_AUTH_SCHEME)

    settings = SourceSettings(
        base_url=sanitize_base_url(domain),
        auth_token=token or None,
        auth_scheme=_normalize_scheme(scheme),
        per_page_default=_number(stored(KEY_PER_PAGE), DEFAULT_PER_PAGE, int),
        list_timeout=_number(stored(KEY_LIST_TIMEOUT), 30, float),
        upload_timeout=_number(stored(KEY_UPLOAD_TIMEOUT), 3600, float),
        probe_timeout=_number(stored(KEY_PROBE_TIMEOUT), 10, float),
        probe_concurrency=_number(stored(KEY_PROBE_CONCURRENCY), 8, int),
        size_names=_size_names(stored(KEY_SIZE_NAMES)),
    )
    logger.debug(
        f"Source settings - base_url: {settings.base_url}, "
        f"auth: {'yes' if settings.auth_token else 'no'} ({settings.auth_scheme})"
    )
    return settings
