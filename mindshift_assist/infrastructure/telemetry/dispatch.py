import atexit
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    # Runs telemetry HTTP submissions off the request thread
    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="telemetry",
        )

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Future]:
        # # Best effort: after shutdown the submission is dropped with a warning
        try:
            future = self._executor.submit(fn, *args, **kwargs)
        except RuntimeError as exc:
            logger.warning("Telemetry submission dropped: %s", exc)
            return None
        future.add_done_callback(_log_failure)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.warning("Telemetry submission failed: %s", exc)


# Global placeholder; created on first use
_DISPATCHER: Optional[BackgroundDispatcher] = None


def get_dispatcher() -> BackgroundDispatcher:
    # Lazy initialization; drained at interpreter exit
    global _DISPATCHER
    if _DISPATCHER is None:
        _DISPATCHER = BackgroundDispatcher()
        atexit.register(_DISPATCHER.shutdown)
    return _DISPATCHER
