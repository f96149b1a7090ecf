from __future__ import annotations

"""
Compiled View Loader.

Resolves compiled view trees for consumers, from a local output directory
or from the base URL where the build output is served. Results are kept in
a bounded, instance-owned cache that the watcher clears after every rebuild.
"""

import json
import logging
import os
import threading
from collections import OrderedDict
from typing import Any, List

from orgviz.core.compiler.writer import artifact_path
from orgviz.domain import constants as const
from orgviz.domain.errors import ViewLoadError, ViewNotFoundError
from orgviz.domain.hierarchy_models import Node
from orgviz.infra.network import (
    RemoteArtifactMissing,
    RemoteFetchError,
    fetch_compiled_document,
    is_http_url,
    join_url,
)

logger = logging.getLogger(__name__)


class ViewLoader:
    """
    Cached access to compiled view artifacts.

    A missing artifact raises ViewNotFoundError; read, network and decoding
    failures raise ViewLoadError so callers can retry those.
    """

    def __init__(self, source: str, max_entries: int = const.DEFAULT_VIEW_CACHE_SIZE) -> None:
        """
        Args:
            source: Output directory path or http(s) base URL.
            max_entries: Maximum number of cached views (least recently used
                         entries are evicted first). Zero disables caching.
        """
        self._source = source
        self._remote = is_http_url(source)
        self._max_entries = max(0, int(max_entries))
        self._cache: "OrderedDict[str, Node]" = OrderedDict()
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def source(self) -> str:
        return self._source

    def load_view(self, view_name: str) -> Node:
        """
        Resolve the compiled tree of a view, using the cache when possible.

        Args:
            view_name: View directory name.

        Returns:
            Node: Root of the compiled tree.

        Raises:
            ViewNotFoundError: No compiled artifact exists for the view.
            ViewLoadError: The artifact exists but could not be loaded.
        """
        with self._lock:
            generation = self._generation
            cached = self._cache.get(view_name)
            if cached is not None:
                self._cache.move_to_end(view_name)
                return cached

        if not _is_plain_name(view_name) or view_name == const.INDEX_NAME:
            raise ViewNotFoundError(view_name)

        data = self._read_document(view_name, view_name)

        try:
            node = Node.from_dict(data)
        except (TypeError, ValueError, RecursionError) as e:
            raise ViewLoadError(view_name, f"malformed artifact: {e}") from e

        with self._lock:
            # Not cached if invalidate() ran during the read
            if self._max_entries and generation == self._generation:
                self._cache[view_name] = node
                self._cache.move_to_end(view_name)
                while len(self._cache) > self._max_entries:
                    self._cache.popitem(last=False)

        return node

    def available_views(self) -> List[str]:
        """
        List the view names recorded in the combined index.

        Raises:
            ViewLoadError: If the index is missing or unreadable.
        """
        try:
            data = self._read_document(const.INDEX_NAME, const.INDEX_NAME)
        except ViewNotFoundError as e:
            raise ViewLoadError(const.INDEX_NAME, "combined index not found; run the compiler") from e

        if not isinstance(data, dict):
            raise ViewLoadError(const.INDEX_NAME, "combined index is not an object")
        return sorted(data)

    def invalidate(self) -> None:
        """Drop every cached view."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._generation += 1
        if count:
            logger.debug(f"View cache invalidated ({count} entries).")

    def cached_views(self) -> List[str]:
        """Names currently held in the cache, least recently used first."""
        with self._lock:
            return list(self._cache)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _read_document(self, view_name: str, artifact_name: str) -> Any:
        """Fetch and decode one artifact; `view_name` labels the errors."""
        if self._remote:
            url = join_url(self._source, f"{artifact_name}{const.OUTPUT_EXTENSION}")
            try:
                return fetch_compiled_document(url)
            except RemoteArtifactMissing as e:
                raise ViewNotFoundError(view_name) from e
            except RemoteFetchError as e:
                raise ViewLoadError(view_name, str(e)) from e

        path = artifact_path(self._source, artifact_name)
        if not os.path.isfile(path):
            logger.error(f"Failed to load view data for {view_name}: {path} does not exist")
            raise ViewNotFoundError(view_name)

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load view data for {view_name}: {e}")
            raise ViewLoadError(view_name, str(e)) from e


def _is_plain_name(name: str) -> bool:
    """Reject empty names and anything that could escape the source directory."""
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name and not name.startswith(const.HIDDEN_PREFIX)
