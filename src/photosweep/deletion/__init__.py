"""Verify-then-delete pipeline for uploaded local files."""

from .events import CollectingEventSink, DeletionEvent, DeletionOutcome, EventSink, LoggingEventSink
from .model import DeletionRequest, MediaItem, RemoteItemRef
from .pipeline import DeletionPipeline
from .request_queue import QueueClosedError, RequestQueue
from .worker import CompletionSignal, DeletionWorker, WorkerState

__all__ = [
    "CollectingEventSink",
    "CompletionSignal",
    "DeletionEvent",
    "DeletionOutcome",
    "DeletionPipeline",
    "DeletionRequest",
    "DeletionWorker",
    "EventSink",
    "LoggingEventSink",
    "MediaItem",
    "QueueClosedError",
    "RemoteItemRef",
    "RequestQueue",
    "WorkerState",
]
