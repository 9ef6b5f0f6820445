import logging
import time

from radiotrack.errors import StaleWriteError

logger = logging.getLogger(__name__)


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.05):
    """
    Run a load-modify-save operation, retrying when the save hits a stale version.

    Only for operations that recompute everything from a fresh load on each
    attempt (e.g. a pure append); anything with side effects outside the
    collection must not be retried.
    """
    for attempt in range(attempts):
        try:
            return func()
        except StaleWriteError as exc:
            if attempt >= attempts - 1:
                raise
            logger.warning(f"Stale write on '{exc.collection}', retrying ({attempt + 1}/{attempts})")
            time.sleep(backoff_base * (2 ** attempt))
