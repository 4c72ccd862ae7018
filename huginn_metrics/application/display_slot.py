"""Caller-owned cell holding the series currently on screen."""

from __future__ import annotations

import threading
from typing import Optional

from huginn_metrics.domain.entities import Series
from huginn_metrics.infrastructure import log_utils


class SeriesDisplaySlot:
    """Latest-request-wins holder for the displayed series.

    Every chart request takes a ticket with :meth:`begin` before fetching.
    :meth:`publish` only stores a result whose ticket is still the newest one
    issued, so a slow request that was superseded can never overwrite the
    result of the request that replaced it. ``None`` is a valid published
    value and means the newest request failed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest_ticket = 0
        self._current: Optional[Series] = None
        self._loading = False

    def begin(self) -> int:
        with self._lock:
            self._latest_ticket += 1
            self._loading = True
            return self._latest_ticket

    def publish(self, ticket: int, series: Optional[Series]) -> bool:
        with self._lock:
            if ticket != self._latest_ticket:
                stale = True
            else:
                stale = False
                self._current = series
                self._loading = False
        if stale:
            log_utils.debug(
                f"Discarded stale chart result for request #{ticket}.", tag="SLOT"
            )
            return False
        return True

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest_ticket

    @property
    def current(self) -> Optional[Series]:
        with self._lock:
            return self._current

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def latest_ticket(self) -> int:
        with self._lock:
            return self._latest_ticket
