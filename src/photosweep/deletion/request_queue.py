"""
FIFO hand-off between deletion producers and the single deletion worker.

Submissions never block. Closing enqueues an end marker behind every
request already submitted, so the consumer drains them all before its
iteration stops.
"""

from __future__ import annotations

import queue
import threading
from typing import Iterator

from .model import DeletionRequest

_END = object()


class QueueClosedError(RuntimeError):
    """Raised on submit after close, or on a second close."""


class RequestQueue:
    def __init__(self) -> None:
        self._items: "queue.SimpleQueue[object]" = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, request: DeletionRequest) -> None:
        with self._lock:
            if self._closed:
                raise QueueClosedError(f"Deletion queue is closed; cannot submit {request.local_path}")
            self._items.put(request)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                raise QueueClosedError("Deletion queue was already closed")
            self._closed = True
            self._items.put(_END)

    def pending(self) -> int:
        """Approximate number of requests not yet taken by the consumer."""
        size = self._items.qsize()
        return size - 1 if self._closed and size > 0 else size

    def __iter__(self) -> Iterator[DeletionRequest]:
        # Single consumer only: the end marker is taken once.
        while True:
            item = self._items.get()
            if item is _END:
                return
            yield item  # type: ignore[misc]
