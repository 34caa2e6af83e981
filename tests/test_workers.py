import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip(
    "PySide6.QtWidgets",
    reason="PySide6 Qt bindings required for worker tests",
    exc_type=ImportError,
)

from PySide6.QtCore import QThreadPool  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from image_finalizer.workers import PoolSubmitter, Worker  # noqa: E402


@pytest.fixture(scope="module")
def qt_app():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


def test_worker_emits_result_and_finished(qt_app):
    results, finished = [], []
    worker = Worker(lambda a, b: a + b, 2, 3)
    worker.signals.result.connect(results.append)
    worker.signals.finished.connect(lambda: finished.append(True))

    worker.run()

    assert results == [5]
    assert finished == [True]


def test_worker_reports_errors(qt_app):
    errors, finished = [], []

    def boom():
        raise RuntimeError("encoder exploded")

    worker = Worker(boom)
    worker.signals.error.connect(errors.append)
    worker.signals.finished.connect(lambda: finished.append(True))

    worker.run()

    assert errors == ["encoder exploded"]
    assert finished == [True]


def test_pool_submitter_runs_jobs(qt_app):
    ran = []
    submitter = PoolSubmitter(pool=QThreadPool())

    for index in range(4):
        submitter(lambda index=index: ran.append(index))

    assert submitter.wait(5000)
    assert sorted(ran) == [0, 1, 2, 3]
