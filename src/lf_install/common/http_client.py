"""Shared HTTP helpers used by the release index client and the downloader.

Encapsulates request/timeout error handling so callers avoid duplicating
try/except blocks. Every call is bounded by a ``Deadline`` that carries the
overall install timeout and an optional cancellation event; failures are
raised as typed transport errors instead of exiting the process.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import IO, Any, Callable, Dict, Optional

import requests

from ..constants import Constants
from ..errors import InstallCancelledError, InstallTimeoutError, TransportError
from .logging_utils import Timer, extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)

ErrorFactory = Callable[[str], TransportError]

DEFAULT_HEADERS = {"User-Agent": Constants.USER_AGENT}


class Deadline:
    """Overall time budget and cancellation signal for one install call."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.timeout = timeout
        self.cancel_event = cancel_event
        self._expires_at = time.monotonic() + timeout if timeout else None

    def remaining(self) -> Optional[float]:
        """Seconds left before expiry, or None when unbounded."""
        if self._expires_at is None:
            return None
        return self._expires_at - time.monotonic()

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, operation: str) -> None:
        """Raise if the call was cancelled or the deadline passed."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise InstallCancelledError(operation)
        if self.expired():
            raise InstallTimeoutError(operation, self.timeout)

    def request_timeout(self, operation: str) -> float:
        """Timeout for a single request: the smaller of the budget left and the cap."""
        self.check(operation)
        remaining = self.remaining()
        if remaining is None:
            return float(Constants.REQUEST_TIMEOUT)
        return min(remaining, float(Constants.REQUEST_TIMEOUT))


def safe_get(
    url: str,
    *,
    context: str,
    deadline: Deadline,
    error_factory: ErrorFactory,
    stream: bool = False,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable tag for logs and errors (e.g. "tofu index").
        deadline: Budget and cancellation signal bounding the request.
        error_factory: Builds the transport error raised on failure.
        stream: Defer body download (see ``stream_to``).
        headers: Extra request headers.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.
    """
    safe_target = safe_url(url)
    request_headers = {**DEFAULT_HEADERS, **(headers or {})}
    timeout = deadline.request_timeout(context)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = requests.get(url, timeout=timeout, stream=stream, headers=request_headers, **kwargs)
        except requests.Timeout as exc:
            if deadline.expired():
                raise InstallTimeoutError(context, deadline.timeout) from exc
            raise error_factory(f"request timed out after {timeout:g} seconds") from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise error_factory(str(exc)) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return res


class _TransferWatchdog:
    """Interrupts a blocking body read once the deadline passes or the call is cancelled.

    Checking between chunks alone cannot stop a read that is still waiting
    for the rest of a chunk, so this thread shuts the socket down instead.
    """

    def __init__(self, res: requests.Response, deadline: Deadline):
        self._res = res
        self._deadline = deadline
        self._done = threading.Event()
        self.fired = False
        self._thread = threading.Thread(target=self._run, daemon=True)

    def __enter__(self) -> "_TransferWatchdog":
        if self._deadline.timeout or self._deadline.cancel_event is not None:
            self._thread.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._done.set()
        if self._thread.is_alive():
            self._thread.join()

    def _interrupted(self) -> bool:
        event = self._deadline.cancel_event
        return self._deadline.expired() or (event is not None and event.is_set())

    def _run(self) -> None:
        while not self._done.wait(Constants.WATCHDOG_INTERVAL):
            if self._interrupted():
                self.fired = True
                try:
                    self._res.raw.shutdown()
                except (RuntimeError, ValueError, OSError) as exc:
                    # The body finished and the connection went back to the pool.
                    logger.debug("transfer watchdog could not interrupt read: %s", exc)
                return


def stream_to(
    res: requests.Response,
    sink: IO[bytes],
    *,
    context: str,
    deadline: Deadline,
    error_factory: ErrorFactory,
    on_chunk: Optional[Callable[[bytes], None]] = None,
) -> int:
    """Copy a streamed response body into ``sink`` chunk by chunk.

    The deadline and cancel signal are checked between chunks, and a
    watchdog interrupts a read that is still blocked when either fires, so a
    slow transfer is aborted even when no single socket read times out.

    Returns:
        int: Number of bytes written.
    """
    written = 0
    try:
        with _TransferWatchdog(res, deadline) as watchdog:
            try:
                for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                    deadline.check(context)
                    if not chunk:
                        continue
                    sink.write(chunk)
                    if on_chunk is not None:
                        on_chunk(chunk)
                    written += len(chunk)
            except requests.RequestException as exc:
                deadline.check(context)
                raise error_factory(f"transfer interrupted: {exc}") from exc
        if watchdog.fired:
            deadline.check(context)
    finally:
        res.close()
    return written


def download_to(
    url: str,
    sink: IO[bytes],
    *,
    context: str,
    deadline: Deadline,
    error_factory: ErrorFactory,
    on_chunk: Optional[Callable[[bytes], None]] = None,
) -> int:
    """GET ``url`` and stream a successful body into ``sink``.

    Returns:
        int: Number of bytes written.
    """
    res = safe_get(url, context=context, deadline=deadline, error_factory=error_factory, stream=True)
    if res.status_code != 200:
        res.close()
        raise error_factory(f"unexpected status code {res.status_code}")
    return stream_to(
        res,
        sink,
        context=context,
        deadline=deadline,
        error_factory=error_factory,
        on_chunk=on_chunk,
    )
