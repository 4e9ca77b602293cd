import logging
import random

logger = logging.getLogger(__name__)


class RateLimiter:
    """Retry budget with exponential backoff and jitter.

    Used by the HTTP clients to space out retries of rate-limited (429) and
    server-error (5xx) responses. A server-provided ``Retry-After`` value takes
    precedence over the computed delay.
    """

    def __init__(
        self,
        initial_delay: float = 1.0,
        max_delay: float = 60.0,
        backoff_factor: float = 2.0,
        jitter_factor: float = 0.1,
        max_retries: int = 5,
    ):
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter_factor = jitter_factor
        self.max_retries = max_retries
        self._current_delay = initial_delay
        self._attempts = 0

    @property
    def exhausted(self) -> bool:
        """Whether the retry budget is spent."""
        return self._attempts >= self.max_retries

    def fresh(self) -> "RateLimiter":
        """A limiter with the same settings and an untouched budget.

        Every request draws on its own copy. Requests never share or reset a
        budget.
        """
        return RateLimiter(
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_factor=self.backoff_factor,
            jitter_factor=self.jitter_factor,
            max_retries=self.max_retries,
        )

    def backoff(self, retry_after: str | None = None) -> float:
        """Consume one retry and return the delay to wait before it.

        Args:
            retry_after: Value of the Retry-After response header, if any

        Returns:
            Delay in seconds, capped at max_delay
        """
        self._attempts += 1
        if retry_after is not None:
            try:
                return min(max(float(retry_after), 0.0), self.max_delay)
            except ValueError:
                logger.debug(f"Ignoring non-numeric Retry-After: {retry_after}")

        delay = self._current_delay
        self._current_delay = min(self._current_delay * self.backoff_factor, self.max_delay)
        # +/- jitter_factor of the delay
        jitter = delay * self.jitter_factor * (2 * random.random() - 1)
        return min(delay + jitter, self.max_delay)
