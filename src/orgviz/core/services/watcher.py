from __future__ import annotations

"""
Data Directory Watcher and Rebuild Scheduler.

Turns bursts of filesystem changes into serialized full rebuilds. The
watcher polls a cheap snapshot of the data tree; the scheduler coalesces
change notifications, waits for a quiet period and runs one compile at a
time on a dedicated daemon thread. After each rebuild the view cache is
invalidated and listeners are told to re-fetch.
"""

import logging
import os
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from orgviz.core.compiler.engine import compile_all
from orgviz.core.compiler.validator import validate_config
from orgviz.core.services.scanner import is_qualifying_name
from orgviz.core.services.view_loader import ViewLoader
from orgviz.domain import constants as const
from orgviz.domain.compile_models import CompileResult
from orgviz.infra.fs import is_within, normalize_path

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Tuple[int, int]]


# -----------------------------------------------------------------------------
# REBUILD SCHEDULER
# -----------------------------------------------------------------------------

class RebuildScheduler:
    """
    Debounce and serialize rebuild requests.

    `request()` may be called from any thread, any number of times. A burst
    of requests produces a single rebuild once no new request arrived for
    `debounce` seconds. Rebuilds never overlap, whether they come from the
    worker thread or from `run_now()`.
    """

    def __init__(
            self,
            rebuild: Callable[[], Any],
            *,
            debounce: float = const.DEFAULT_DEBOUNCE_SECONDS,
            on_complete: Optional[Callable[[Any], None]] = None,
    ) -> None:
        self._rebuild = rebuild
        self._debounce = max(0.0, float(debounce))
        self._on_complete = on_complete

        self._cond = threading.Condition()
        self._run_lock = threading.Lock()
        self._pending = False
        self._last_request = 0.0
        self._stopping = False
        self._thread: Optional[threading.Thread] = None

        self.runs = 0

    def start(self) -> None:
        if self._thread is not None:
            return
        with self._cond:
            self._stopping = False
        self._thread = threading.Thread(
            target=self._loop, name="RebuildScheduler", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the worker; an in-flight rebuild is allowed to finish."""
        with self._cond:
            self._stopping = True
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def request(self) -> None:
        """Signal that the source tree changed."""
        with self._cond:
            self._pending = True
            self._last_request = time.monotonic()
            self._cond.notify_all()

    def run_now(self) -> Any:
        """Run one rebuild synchronously, serialized with the worker."""
        return self._execute()

    # -------------------------------------------------------------------------
    # Worker internals
    # -------------------------------------------------------------------------

    def _loop(self) -> None:
        while True:
            with self._cond:
                while not self._pending and not self._stopping:
                    self._cond.wait()
                if self._stopping:
                    return

                # Wait for the burst to settle
                while not self._stopping:
                    remaining = self._last_request + self._debounce - time.monotonic()
                    if remaining <= 0:
                        break
                    self._cond.wait(remaining)
                if self._stopping:
                    return

                self._pending = False

            self._execute()

    def _execute(self) -> Any:
        # on_complete runs under the run lock so callbacks arrive in rebuild order;
        # it must not call run_now()
        with self._run_lock:
            try:
                result: Any = self._rebuild()
            except Exception as e:
                logger.error(f"Rebuild failed: {e}", exc_info=True)
                result = e
            self.runs += 1

            if self._on_complete is not None:
                try:
                    self._on_complete(result)
                except Exception as e:
                    logger.error(f"Rebuild completion callback failed: {e}", exc_info=True)
        return result


# -----------------------------------------------------------------------------
# DIRECTORY WATCHER
# -----------------------------------------------------------------------------

class DataDirectoryWatcher:
    """
    Poll the data root and notify the scheduler when anything changed.

    The snapshot covers every qualifying directory and every non-hidden file
    (metadata documents included) with its modification time and size.
    """

    def __init__(
            self,
            data_dir: str,
            scheduler: RebuildScheduler,
            *,
            interval: float = const.DEFAULT_WATCH_INTERVAL,
            excluded_dirs: Optional[Iterable[str]] = None,
            ignore_paths: Iterable[str] = (),
    ) -> None:
        self._data_dir = data_dir
        self._scheduler = scheduler
        self._interval = interval
        self._excluded = set(const.DEFAULT_EXCLUDED_DIRS if excluded_dirs is None else excluded_dirs)
        self._ignore = [os.path.abspath(p) for p in ignore_paths]

        self._snapshot: Snapshot = {}
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def take_snapshot(self) -> Snapshot:
        snapshot: Snapshot = {}
        if not os.path.isdir(self._data_dir):
            return snapshot

        for root, dirs, files in os.walk(self._data_dir):
            dirs[:] = [
                d for d in dirs
                if is_qualifying_name(d, self._excluded)
                and not any(is_within(os.path.join(root, d), p) for p in self._ignore)
            ]
            for name in dirs + [f for f in files if not f.startswith(const.HIDDEN_PREFIX)]:
                full = os.path.join(root, name)
                try:
                    st = os.stat(full, follow_symlinks=False)
                except OSError:
                    continue
                snapshot[os.path.relpath(full, self._data_dir)] = (st.st_mtime_ns, st.st_size)

        return snapshot

    def prime(self) -> None:
        """Record the current state as the baseline for change detection."""
        self._snapshot = self.take_snapshot()

    def poll_once(self) -> bool:
        """Compare against the previous snapshot; request a rebuild on change."""
        current = self.take_snapshot()
        changed = current != self._snapshot
        self._snapshot = current
        if changed:
            logger.info("Data directory changed, regenerating models...")
            self._scheduler.request()
        return changed

    def start(self) -> None:
        if self._thread is not None:
            return
        self.prime()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="DataDirectoryWatcher", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.poll_once()
            except Exception as e:
                logger.error(f"Watcher poll failed: {e}", exc_info=True)


# -----------------------------------------------------------------------------
# WATCH SESSION (INTEGRATION)
# -----------------------------------------------------------------------------

class WatchSession:
    """
    Wire compile, watcher, scheduler and view cache together.

    Every completed rebuild invalidates the loader cache and is then passed
    to each listener, which is the cue for presentation layers to re-fetch.
    """

    def __init__(
            self,
            config: Optional[Dict[str, Any]] = None,
            *,
            loader: Optional[ViewLoader] = None,
            listeners: Optional[List[Callable[[CompileResult], None]]] = None,
    ) -> None:
        self._config, warnings = validate_config(config or {}, strict=False)
        for warning in warnings:
            logger.warning(f"Configuration Warning: {warning}")

        cwd = os.getcwd()
        data_dir = normalize_path(self._config["data_dir"], cwd)
        output_dir = normalize_path(self._config["output_dir"], cwd)

        self.loader = loader or ViewLoader(output_dir, self._config["view_cache_size"])
        self._listeners: List[Callable[[CompileResult], None]] = list(listeners or [])

        self.scheduler = RebuildScheduler(
            self._compile,
            debounce=self._config["debounce_seconds"],
            on_complete=self._after_rebuild,
        )
        self.watcher = DataDirectoryWatcher(
            data_dir,
            self.scheduler,
            interval=self._config["watch_interval"],
            excluded_dirs=self._config["excluded_dirs"],
            ignore_paths=[output_dir],
        )

    def add_listener(self, listener: Callable[[CompileResult], None]) -> None:
        self._listeners.append(listener)

    def start(self) -> Any:
        """Compile once, then begin watching. Returns the initial result."""
        result = self.scheduler.run_now()
        self.scheduler.start()
        self.watcher.start()
        return result

    def stop(self) -> None:
        self.watcher.stop()
        self.scheduler.stop()

    def _compile(self) -> CompileResult:
        return compile_all(self._config)

    def _after_rebuild(self, result: Any) -> None:
        self.loader.invalidate()
        if not isinstance(result, CompileResult):
            return
        if result.ok:
            logger.info("Data models regenerated")
        else:
            logger.error(f"Failed to regenerate data models: {result.error}")
        for listener in list(self._listeners):
            listener(result)
