from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ..config import Settings
from ..imaging.loader import ImageLoader
from ..logging import get_logger
from .events import EventSink
from .model import DeletionRequest, RemoteItemRef
from .request_queue import RequestQueue
from .worker import CompletionSignal, DeletionWorker, WorkerState

logger = get_logger(__name__)


class DeletionPipeline:
    """
    Owner of one deletion queue and its worker.

    Producers call ``submit_deletion_request`` from any thread; the owner
    calls ``start_worker`` once, ``close_deletion_queue`` once after every
    producer is done, then waits on the returned completion signal.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        loader: Optional[ImageLoader] = None,
        classifier: Optional[Callable[[Path], bool]] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.queue = RequestQueue()
        self.worker = DeletionWorker(
            self.queue,
            loader=loader,
            classifier=classifier,
            sink=sink,
            settings=self.settings,
        )

    @property
    def state(self) -> WorkerState:
        return self.worker.state

    def submit_deletion_request(self, remote_item: RemoteItemRef, local_path: Path | str) -> None:
        """Queue a local file for verified deletion; returns immediately."""
        request = DeletionRequest(remote_item=remote_item, local_path=Path(local_path))
        self.queue.submit(request)
        logger.debug(f"Queued deletion of {request.local_path}")

    def close_deletion_queue(self) -> None:
        self.queue.close()

    def start_worker(self) -> CompletionSignal:
        return self.worker.start()
