from __future__ import annotations

from orgviz.domain.constants import APP_NAME, CURRENT_VERSION

USER_AGENT = f"{APP_NAME}-client/{CURRENT_VERSION}"
DEFAULT_TIMEOUT = 10


def is_http_url(source: str) -> bool:
    """Check whether a source string points at an HTTP(S) location."""
    return source.lower().startswith(("http://", "https://"))


def join_url(base_url: str, name: str) -> str:
    """Append a file name to a base URL with exactly one separating slash."""
    return f"{base_url.rstrip('/')}/{name}"
