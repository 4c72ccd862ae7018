"""Retry decorator shared by the HTTP client."""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, Iterable, Optional, Tuple, Type, TypeVar

from huginn_metrics.infrastructure import log_utils

TFunc = TypeVar("TFunc", bound=Callable[..., Any])

MAX_BACKOFF_SECONDS = 30.0


def retry_on_network_error(
    should_retry: Callable[[Any, int], bool],
    *,
    exception_types: Iterable[Type[BaseException]] = (),
) -> Callable[[TFunc], TFunc]:
    """Retry a client method with exponential backoff on transient failures.

    Parameters
    ----------
    should_retry:
        Callable that accepts ``self`` and an HTTP status code, returning ``True``
        when the request should be retried.
    exception_types:
        Exception types intercepted by the decorator, typically
        :class:`~huginn_metrics.infrastructure.huginn_client.HuginnApiError`.
        Exceptions without a ``status_code`` are network errors and always retried.

    The wrapped instance provides ``max_retries`` (total attempts) and
    ``backoff_base`` (seconds). A ``retry_after`` attribute on the exception,
    e.g. from a 429 ``Retry-After`` header, overrides the computed delay.
    """

    exception_tuple: Tuple[Type[BaseException], ...] = tuple(exception_types)

    def decorator(func: TFunc) -> TFunc:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            attempts: int = max(1, int(getattr(self, "max_retries", 1)))
            backoff_base: float = getattr(self, "backoff_base", 0.0)

            for attempt in range(attempts):
                try:
                    return func(self, *args, **kwargs)
                except exception_tuple as exc:  # type: ignore[misc]
                    status_code: Optional[int] = getattr(exc, "status_code", None)
                    retryable = status_code is None or should_retry(self, status_code)
                    if not retryable or attempt == attempts - 1:
                        raise

                    sleep_for = _delay(exc, backoff_base, attempt)
                    target = _describe_call(args, kwargs)
                    reason = "network error" if status_code is None else f"HTTP {status_code}"
                    log_utils.warn(
                        f"[retry] {reason} on {target} (attempt {attempt + 1}/{attempts}), "
                        f"retrying in {sleep_for:.2f}s...",
                        tag="API",
                    )
                    if sleep_for > 0:
                        time.sleep(sleep_for)

            raise RuntimeError("retry_on_network_error exhausted without executing the call.")

        return wrapper  # type: ignore[return-value]

    return decorator


def _delay(exc: BaseException, backoff_base: float, attempt: int) -> float:
    retry_after = getattr(exc, "retry_after", None)
    if isinstance(retry_after, (int, float)) and retry_after >= 0:
        return min(float(retry_after), MAX_BACKOFF_SECONDS)
    return min(backoff_base * (2 ** attempt), MAX_BACKOFF_SECONDS)


def _describe_call(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    method = args[0] if args else kwargs.get("method", "<method>")
    path = args[1] if len(args) > 1 else kwargs.get("path", "<path>")
    return f"{method} {path}"
