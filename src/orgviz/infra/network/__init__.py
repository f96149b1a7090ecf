from __future__ import annotations

"""
Network Communication Infrastructure.

Orchestrates HTTP interactions used to read compiled views from a served
build output.
"""

from orgviz.infra.network.common import is_http_url, join_url
from orgviz.infra.network.view_client import (
    RemoteArtifactMissing,
    RemoteFetchError,
    fetch_compiled_document,
)

__all__ = [
    "fetch_compiled_document",
    "RemoteArtifactMissing",
    "RemoteFetchError",
    "is_http_url",
    "join_url",
]
