# workers.py
"""
Background task execution utilities for Image Finalizer.
Defines a Worker for QRunnable tasks and a submitter the session controller
uses to run previews and batch exports on a QThreadPool.
"""
import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

logger = logging.getLogger("image_finalizer.workers")


class WorkerSignals(QObject):
    started = Signal()
    finished = Signal()
    error = Signal(str)
    result = Signal(object)


class Worker(QRunnable):
    """Wraps any function to run in a QThreadPool."""
    def __init__(self, fn: Callable, *args, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            self.signals.started.emit()
            result = self.fn(*self.args, **self.kwargs)
            self.signals.result.emit(result)
        except Exception as e:
            logger.exception("Worker error: %s", e)
            self.signals.error.emit(str(e))
        finally:
            self.signals.finished.emit()


class PoolSubmitter:
    """Callable that starts jobs on a QThreadPool.

    Passed to :class:`BorderSessionController` as its ``submit`` hook; the
    controller only needs ``submit(job)``.
    """
    def __init__(
        self,
        pool: Optional[QThreadPool] = None,
        on_error: Optional[Callable[[str], Any]] = None,
    ):
        self.pool = pool or QThreadPool.globalInstance()
        self._on_error = on_error

    def __call__(self, job: Callable[[], Any]) -> Worker:
        worker = Worker(job)
        if self._on_error is not None:
            worker.signals.error.connect(self._on_error)
        self.pool.start(worker)
        return worker

    def wait(self, msecs: int = -1) -> bool:
        """Block until every started job has finished."""
        return self.pool.waitForDone(msecs)
