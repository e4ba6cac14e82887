"""LegResolver: runs routing lookups off the caller's thread.

Requests go into an inbound queue consumed by one background worker; each
finished lookup is posted to an outbound queue as a :class:`LegCompletion`.
The owner of the controller drains completions on its own thread, so the
segment store is only ever mutated from a single thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass

from course_planner.routing.client import RoutingClient
from course_planner.routing.models import LegRequest, LegResult

_logger = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class LegCompletion:
    """A finished routing lookup paired with the request that issued it."""

    request: LegRequest
    result: LegResult


class LegResolver:
    """Background worker that resolves :class:`LegRequest` objects.

    Parameters
    ----------
    client:
        Object with ``resolve_leg(origin, destination, mode) -> LegResult``.
    """

    def __init__(self, client: RoutingClient) -> None:
        self._client = client
        self._inbound: queue.Queue = queue.Queue()
        self._outbound: queue.Queue[LegCompletion] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._in_flight = 0
        self._count_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background worker thread."""
        if self.is_running:
            return
        self._thread = threading.Thread(target=self._run, daemon=True, name="LegResolver")
        self._thread.start()

    def stop(self) -> None:
        """Ask the worker to finish and join it."""
        if self._thread is None:
            return
        self._inbound.put(_STOP)
        self._thread.join(timeout=2.0)
        self._thread = None

    def submit(self, request: LegRequest) -> None:
        """Queue *request* for resolution."""
        with self._count_lock:
            self._in_flight += 1
        self._inbound.put(request)

    def get_completion(self, timeout: float | None = 0.0) -> LegCompletion | None:
        """Return the next finished lookup, or None if none is ready in time.

        ``timeout=0.0`` polls without blocking; ``None`` blocks indefinitely.
        """
        try:
            if timeout == 0.0:
                completion = self._outbound.get_nowait()
            else:
                completion = self._outbound.get(timeout=timeout)
        except queue.Empty:
            return None
        with self._count_lock:
            self._in_flight -= 1
        return completion

    def pending(self) -> int:
        """Number of submitted requests whose completion has not been collected."""
        with self._count_lock:
            return self._in_flight

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while True:
            item = self._inbound.get()
            if item is _STOP:
                break
            self._outbound.put(LegCompletion(request=item, result=self._resolve(item)))

    def _resolve(self, request: LegRequest) -> LegResult:
        try:
            return self._client.resolve_leg(request.origin, request.destination, request.mode)
        except Exception:
            _logger.exception("Routing client raised while resolving leg #%d", request.seq)
            return LegResult.not_ok()
