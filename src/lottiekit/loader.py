"""
Composition loading.

Byte acquisition is delegated to a ByteSource; parsing runs either on the
caller's thread (load) or on a worker pool (load_async, load_composition).

Usage:
    task = load_async(FileSource("anim.json"), scale=2.0, on_result=on_loaded)

    # Later, if the result is no longer wanted:
    task.cancel()
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, BinaryIO, Callable, Optional, Protocol, Union
import asyncio
import io
import logging
import threading

from lottiekit.config.settings import Settings, get_settings
from lottiekit.errors import LottieError, SourceUnavailableError
from lottiekit.model.composition import Composition
from lottiekit.parser import parse

logger = logging.getLogger(__name__)


class ByteSource(Protocol):
    """Anything that can open a fresh binary stream of a composition."""

    def open(self) -> BinaryIO:
        ...


class FileSource:
    """Composition stored in a file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def open(self) -> BinaryIO:
        try:
            return open(self.path, "rb")
        except OSError as e:
            raise SourceUnavailableError(f"Unable to open {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"FileSource({str(self.path)!r})"


class BytesSource:
    """Composition already held in memory, e.g. downloaded from the network."""

    def __init__(self, data: Union[bytes, str]):
        self.data = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def __repr__(self) -> str:
        return f"BytesSource({len(self.data)} bytes)"


def load(
    source: ByteSource,
    scale: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Composition:
    """Open the source and parse it on the calling thread."""
    try:
        stream = source.open()
    except OSError as e:
        raise SourceUnavailableError(f"Unable to open {source!r}: {e}") from e
    with stream:
        return parse(stream, scale, settings)


@dataclass
class LoadResult:
    """Outcome of one background load."""
    success: bool
    composition: Optional[Composition] = None
    error: Optional[Exception] = None


ResultListener = Callable[[LoadResult], None]
Dispatcher = Callable[[Callable[[], None]], Any]


# Shared pools, created on first use

_pool_lock = threading.Lock()
_worker_pool: Optional[ThreadPoolExecutor] = None
_callback_pool: Optional[ThreadPoolExecutor] = None


def _workers() -> ThreadPoolExecutor:
    global _worker_pool
    with _pool_lock:
        if _worker_pool is None:
            loader_settings = get_settings().loader
            _worker_pool = ThreadPoolExecutor(
                max_workers=loader_settings.max_workers,
                thread_name_prefix=loader_settings.thread_name_prefix,
            )
        return _worker_pool


def _callbacks() -> ThreadPoolExecutor:
    global _callback_pool
    with _pool_lock:
        if _callback_pool is None:
            _callback_pool = ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix=f"{get_settings().loader.thread_name_prefix}-callback",
            )
        return _callback_pool


def shutdown(wait: bool = True) -> None:
    """Stop the shared pools; they are recreated on the next load."""
    global _worker_pool, _callback_pool
    with _pool_lock:
        pools = [pool for pool in (_worker_pool, _callback_pool) if pool is not None]
        _worker_pool = _callback_pool = None
    for pool in pools:
        pool.shutdown(wait=wait)


class LoadTask:
    """Handle to one background load.

    Usage:
        task = load_async(source, on_result=on_loaded)
        task.cancel()           # suppress delivery
        result = task.wait()    # or block for the outcome
    """

    def __init__(self, on_result: Optional[ResultListener] = None):
        self._on_result = on_result
        self._lock = threading.Lock()
        self._cancelled = False
        self._delivered = False
        self._done = threading.Event()
        self._result: Optional[LoadResult] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """True once the result was delivered or its delivery suppressed."""
        return self._done.is_set()

    @property
    def result(self) -> Optional[LoadResult]:
        """Delivered result (None while running or after cancel)."""
        return self._result

    def cancel(self) -> bool:
        """Suppress delivery; never blocks on the running parse.

        Returns:
            False if the result had already been delivered
        """
        with self._lock:
            if self._delivered:
                return False
            self._cancelled = True
        logger.debug("Load cancelled")
        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[LoadResult]:
        """Wait for the load to finish.

        Args:
            timeout: Max seconds to wait. None does not wait without limit; it
                uses loader.wait_timeout from the settings (30s by default)

        Returns:
            LoadResult, or None on timeout or cancellation
        """
        if timeout is None:
            timeout = get_settings().loader.wait_timeout
        self._done.wait(timeout)
        return self._result

    def _release(self) -> None:
        self._done.set()

    def _finish(self, result: LoadResult) -> None:
        """Deliver the result at most once, unless cancelled."""
        try:
            with self._lock:
                if self._cancelled or self._delivered:
                    return
                self._delivered = True
                self._result = result

            if self._on_result:
                try:
                    self._on_result(result)
                except Exception as e:
                    logger.error(f"Load listener failed: {e}")
        finally:
            self._done.set()


def _run_load(source: ByteSource, scale: Optional[float], settings: Optional[Settings]) -> LoadResult:
    try:
        composition = load(source, scale, settings)
    except LottieError as e:
        logger.error(f"Failed to load composition from {source!r}: {e}")
        return LoadResult(success=False, error=e)
    except Exception as e:
        logger.exception(f"Unexpected error loading composition from {source!r}")
        return LoadResult(success=False, error=e)
    return LoadResult(success=True, composition=composition)


def load_async(
    source: ByteSource,
    scale: Optional[float] = None,
    on_result: Optional[ResultListener] = None,
    executor: Optional[Executor] = None,
    dispatcher: Optional[Dispatcher] = None,
    settings: Optional[Settings] = None,
) -> LoadTask:
    """Parse a composition in the background.

    Args:
        source: Where the bytes come from
        scale: Density scale; None uses the configured default
        on_result: Called exactly once with the outcome, unless cancelled
        executor: Pool that runs the parse (shared loader pool by default)
        dispatcher: Runs the delivery callable on the designated callback
            context (a shared single-thread pool by default)

    Returns:
        LoadTask handle
    """
    task = LoadTask(on_result)
    executor = executor or _workers()
    dispatcher = dispatcher or _callbacks().submit

    def _load():
        result = _run_load(source, scale, settings)
        if task.cancelled:
            logger.debug(f"Dropping result for cancelled load of {source!r}")
            task._release()
            return
        try:
            dispatcher(partial(task._finish, result))
        except Exception as e:
            logger.error(f"Unable to dispatch load result: {e}")
            task._release()

    executor.submit(_load)
    return task


async def load_composition(
    source: ByteSource,
    scale: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> Composition:
    """Parse on the loader pool without blocking the event loop.

    Raises the same errors as load().
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_workers(), partial(load, source, scale, settings))
