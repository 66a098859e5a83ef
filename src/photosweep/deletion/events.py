"""Terminal outcomes of deletion requests and the sinks that receive them."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Protocol

from ..logging import get_logger
from .model import DeletionRequest

logger = get_logger(__name__)


class DeletionOutcome(str, Enum):
    DELETED = "deleted"
    DRY_RUN = "dry_run"
    NOT_SIMILAR = "not_similar"
    NOT_AN_IMAGE = "not_an_image"
    FETCH_FAILED = "fetch_failed"
    REMOTE_DECODE_FAILED = "remote_decode_failed"
    LOCAL_DECODE_FAILED = "local_decode_failed"
    DELETE_FAILED = "delete_failed"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self not in (DeletionOutcome.DELETED, DeletionOutcome.DRY_RUN, DeletionOutcome.NOT_SIMILAR)


@dataclass(frozen=True)
class DeletionEvent:
    request: DeletionRequest
    outcome: DeletionOutcome
    reason: Optional[str] = None
    distance: Optional[int] = None

    @property
    def deleted(self) -> bool:
        return self.outcome is DeletionOutcome.DELETED


class EventSink(Protocol):
    def record(self, event: DeletionEvent) -> None:
        ...


class LoggingEventSink:
    """Writes one log line per request outcome."""

    def record(self, event: DeletionEvent) -> None:
        path = event.request.local_path
        if event.outcome is DeletionOutcome.DELETED:
            logger.info(f"Uploaded file {path} was checked for integrity and deleted (distance: {event.distance})")
        elif event.outcome is DeletionOutcome.DRY_RUN:
            logger.info(f"Uploaded file {path} matches (distance: {event.distance}); dry run, not deleting")
        elif event.outcome is DeletionOutcome.NOT_SIMILAR:
            logger.info(f"{path} is not the same image as {event.request.url} (distance: {event.distance}). Won't delete")
        elif event.outcome is DeletionOutcome.DELETE_FAILED:
            logger.warning(event.reason)
        else:
            logger.warning(f"{event.reason}. Won't delete {path} [{event.outcome.value}]")


class CollectingEventSink:
    """Keeps every event in arrival order, optionally forwarding to another sink."""

    def __init__(self, forward_to: Optional[EventSink] = None) -> None:
        self._forward_to = forward_to
        self._events: List[DeletionEvent] = []
        self._lock = threading.Lock()

    def record(self, event: DeletionEvent) -> None:
        with self._lock:
            self._events.append(event)
        if self._forward_to is not None:
            self._forward_to.record(event)

    @property
    def events(self) -> List[DeletionEvent]:
        with self._lock:
            return list(self._events)

    def summary(self) -> Dict[DeletionOutcome, int]:
        with self._lock:
            return dict(Counter(event.outcome for event in self._events))
