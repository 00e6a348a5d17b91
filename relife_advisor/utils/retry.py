"""
Retry utilities for calls to the forecasting service.

Provides exponential backoff retry logic for unreliable network operations.
This is a transport concern: the catalog and matcher never retry on their own.

Usage:
    from relife_advisor.utils.retry import retry_with_backoff, RetryConfig

    @retry_with_backoff(max_retries=3)
    def fetch_listing():
        return session.get(url)

    # Or with custom config
    config = RetryConfig(max_retries=5, base_delay=2.0)
    with RetryableRequest(config) as request:
        response = request.get(url)
"""

import functools
import logging
import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (
            requests.ConnectionError,
            requests.Timeout,
            ConnectionError,
            TimeoutError,
        )
    )
    # HTTP status codes to retry
    retryable_status_codes: Tuple[int, ...] = (429, 500, 502, 503, 504)


DEFAULT_RETRY_CONFIG = RetryConfig()


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay for exponential backoff.

    Args:
        attempt: Current attempt number (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay = min(
        config.base_delay * (config.exponential_base ** attempt),
        config.max_delay,
    )

    if config.jitter:
        # Add up to 25% random jitter
        delay = delay * (1 + random.uniform(0, 0.25))

    return delay


def should_retry_exception(exc: Exception, config: RetryConfig) -> bool:
    """Check if exception is retryable."""
    response = getattr(exc, "response", None)
    if response is not None and hasattr(response, "status_code"):
        return response.status_code in config.retryable_status_codes

    return isinstance(exc, config.retryable_exceptions)


def retry_with_backoff(
    func: Optional[Callable[..., T]] = None,
    *,
    config: Optional[RetryConfig] = None,
    max_retries: Optional[int] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
) -> Callable[..., T]:
    """
    Decorator/function for retrying with exponential backoff.

    Can be used as a decorator with or without arguments:

        @retry_with_backoff
        def my_func():
            ...

        @retry_with_backoff(max_retries=3)
        def my_other_func():
            ...

    Args:
        func: Function to retry
        config: Full retry configuration
        max_retries: Override for max retries (convenience)
        on_retry: Callback called on each retry (exc, attempt)

    Returns:
        Decorated function
    """
    config = config or RetryConfig()
    if max_retries is not None:
        config = replace(config, max_retries=max_retries)

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(config.max_retries + 1):
                try:
                    return fn(*args, **kwargs)
                except Exception as exc:
                    if not should_retry_exception(exc, config):
                        logger.debug(f"Non-retryable exception: {type(exc).__name__}")
                        raise

                    if attempt >= config.max_retries:
                        logger.error(
                            f"All {config.max_retries} retries failed for {fn.__name__}"
                        )
                        raise

                    delay = calculate_delay(attempt, config)
                    logger.warning(
                        f"Retry {attempt + 1}/{config.max_retries} for {fn.__name__} "
                        f"after {delay:.1f}s (error: {exc})"
                    )
                    if on_retry:
                        on_retry(exc, attempt)
                    time.sleep(delay)

            raise RuntimeError("Retry logic error")

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


class RetryableRequest:
    """
    Retrying wrapper around a requests session.

    Usage:
        with RetryableRequest(config) as request:
            response = request.get(url)

    Or manually:
        request = RetryableRequest(session=my_session)
        response = request.post(url, json=payload)
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.config = config or DEFAULT_RETRY_CONFIG
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def __enter__(self) -> "RetryableRequest":
        if self._session is None:
            self._session = requests.Session()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Make HTTP request with retry logic."""
        kwargs.setdefault("timeout", self.timeout)

        @retry_with_backoff(config=self.config)
        def _request() -> requests.Response:
            response = self.session.request(method, url, **kwargs)
            # Raise for retryable status codes so the decorator sees them
            if response.status_code in self.config.retryable_status_codes:
                response.raise_for_status()
            return response

        return _request()

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """GET request with retry."""
        return self._make_request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        """POST request with retry."""
        return self._make_request("POST", url, **kwargs)
