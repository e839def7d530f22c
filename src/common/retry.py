"""Retry policy with linear backoff."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Bounded retry with linear backoff (`base_delay * attempt`).

    `max_attempts` counts the first try, so 3 means one try plus two retries.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * attempt

    def call(self, func: Callable[[], T], description: str = "operation") -> tuple[T, int]:
        """Call `func` until it succeeds or attempts run out.

        Returns:
            Tuple of (result, attempts used)

        Raises:
            The last exception raised by `func` once attempts are exhausted
        """
        attempts = max(1, self.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return func(), attempt
            except Exception as e:
                if attempt == attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.warning(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    description, attempt, attempts, e, delay,
                )
                self.sleep(delay)
        raise RuntimeError("unreachable")
