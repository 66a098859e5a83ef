"""
Single-consumer worker that verifies uploads before deleting local files.

Requests are handled strictly one at a time in queue order. Every request
ends in exactly one ``DeletionEvent``; no error raised while handling a
request stops the worker.
"""

from __future__ import annotations

import os
import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from ..config import Settings
from ..errors import DecodeError, DeleteError, FetchError, NotAnImageError
from ..files.filetypes import extension_classifier
from ..imaging.loader import ImageLoader
from ..logging import get_logger
from ..similarity.compare import are_similar, hamming_distance
from ..similarity.fingerprint import fingerprint
from .events import DeletionEvent, DeletionOutcome, EventSink, LoggingEventSink
from .model import DeletionRequest
from .request_queue import RequestQueue

logger = get_logger(__name__)


class WorkerState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class CompletionSignal:
    """
    One-shot notification that the worker has drained its queue.

    Fired exactly once, after the last request submitted before closure
    has been fully handled. Only one thread may wait on it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._waiter: Optional[int] = None

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        me = threading.get_ident()
        with self._lock:
            if self._waiter is None:
                self._waiter = me
            elif self._waiter != me:
                raise RuntimeError("Completion signal already has a waiter")
        return self._event.wait(timeout)

    def _fire(self) -> None:
        with self._lock:
            if self._event.is_set():
                raise RuntimeError("Completion signal fired twice")
            self._event.set()


class DeletionWorker:
    def __init__(
        self,
        requests: RequestQueue,
        loader: Optional[ImageLoader] = None,
        classifier: Optional[Callable[[Path], bool]] = None,
        sink: Optional[EventSink] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or Settings()
        self._requests = requests
        self._owns_loader = loader is None
        self._loader = loader or ImageLoader(timeout=self._settings.request_timeout)
        self._classifier = classifier or extension_classifier(self._settings.image_extensions)
        self._sink = sink or LoggingEventSink()
        self._thread: Optional[threading.Thread] = None
        self._signal: Optional[CompletionSignal] = None

    @property
    def state(self) -> WorkerState:
        if self._signal is None:
            return WorkerState.PENDING
        if self._signal.is_set():
            return WorkerState.STOPPED
        if self._requests.closed:
            return WorkerState.DRAINING
        return WorkerState.RUNNING

    def start(self) -> CompletionSignal:
        """Spawn the consumer thread and return its completion signal."""
        if self._signal is not None:
            raise RuntimeError("Deletion worker already started")
        self._signal = CompletionSignal()
        self._thread = threading.Thread(
            target=self._run, args=(self._signal,), name="photosweep-deletions", daemon=True
        )
        self._thread.start()
        return self._signal

    def _run(self, signal: CompletionSignal) -> None:
        try:
            for request in self._requests:
                self._handle(request)
        finally:
            logger.debug("Deletion queue drained")
            try:
                if self._owns_loader:
                    self._loader.close()
            except Exception:
                logger.exception("Failed closing image loader")
            finally:
                signal._fire()

    def _handle(self, request: DeletionRequest) -> None:
        try:
            event = self.verify_and_maybe_delete(request)
        except Exception as exc:
            logger.exception(f"Unexpected error while handling {request.local_path}")
            event = DeletionEvent(request, DeletionOutcome.ERROR, reason=str(exc))

        try:
            self._sink.record(event)
        except Exception:
            logger.exception(f"Event sink failed for {request.local_path}")

    def verify_and_maybe_delete(self, request: DeletionRequest) -> DeletionEvent:
        """
        Delete ``request.local_path`` only if the uploaded copy looks the same.

        Args:
            request: Remote item and local path pair

        Returns:
            The terminal event for this request
        """
        path = Path(request.local_path)

        try:
            self._ensure_image(path)
        except NotAnImageError as exc:
            return DeletionEvent(request, DeletionOutcome.NOT_AN_IMAGE, reason=str(exc))

        try:
            remote_img = self._loader.load_from_url(request.url)
        except FetchError as exc:
            return DeletionEvent(request, DeletionOutcome.FETCH_FAILED, reason=f"Failed getting image from URL: {exc}")
        except DecodeError as exc:
            return DeletionEvent(request, DeletionOutcome.REMOTE_DECODE_FAILED, reason=f"Failed decoding uploaded image: {exc}")

        try:
            local_img = self._loader.load_from_path(path)
        except DecodeError as exc:
            return DeletionEvent(request, DeletionOutcome.LOCAL_DECODE_FAILED, reason=f"Failed loading local image from path: {exc}")

        remote_fp = fingerprint(remote_img, self._settings.hash_size)
        local_fp = fingerprint(local_img, self._settings.hash_size)
        if not are_similar(remote_fp, local_fp):
            distance = hamming_distance(remote_fp, local_fp) if len(remote_fp) == len(local_fp) else None
            return DeletionEvent(request, DeletionOutcome.NOT_SIMILAR, distance=distance)

        distance = hamming_distance(remote_fp, local_fp)
        if self._settings.dry_run:
            return DeletionEvent(request, DeletionOutcome.DRY_RUN, distance=distance)

        try:
            _remove(path)
        except DeleteError as exc:
            return DeletionEvent(request, DeletionOutcome.DELETE_FAILED, reason=str(exc), distance=distance)
        return DeletionEvent(request, DeletionOutcome.DELETED, distance=distance)

    def _ensure_image(self, path: Path) -> None:
        if not self._classifier(path):
            raise NotAnImageError(f"{path} is not an image")


def _remove(path: Path) -> None:
    try:
        os.remove(path)
    except OSError as exc:
        raise DeleteError(f"Failed deleting {path}: {exc}") from exc
