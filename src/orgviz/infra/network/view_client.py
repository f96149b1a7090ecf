from __future__ import annotations

import logging
from typing import Any

import requests

from orgviz.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

_MISSING_STATUS = (404, 410)


class RemoteArtifactMissing(Exception):
    """The server answered that the requested artifact does not exist."""


class RemoteFetchError(Exception):
    """The artifact could not be retrieved or decoded (possibly transient)."""


def fetch_compiled_document(url: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """Download and decode one generated JSON artifact from a served build."""
    headers = {"User-Agent": USER_AGENT, "Cache-Control": "no-cache"}
    logger.debug(f"Network: Fetching compiled artifact from: {url}")

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        logger.warning(f"Network: Artifact request timed out after {timeout}s: {url}")
        raise RemoteFetchError(f"timed out after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Network: Communication error while fetching {url}: {e}")
        raise RemoteFetchError(str(e)) from e

    if response.status_code in _MISSING_STATUS:
        raise RemoteArtifactMissing(url)

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        logger.error(f"Network: Server rejected artifact request {url}: {e}")
        raise RemoteFetchError(str(e)) from e

    try:
        data = response.json()
    except ValueError as e:
        logger.warning(f"Network: Received malformed artifact from {url}: {e}")
        raise RemoteFetchError(f"malformed JSON: {e}") from e

    size_kb = len(response.content) / 1024
    logger.debug(f"Network: Artifact synchronized ({size_kb:.1f} KB).")
    return data
