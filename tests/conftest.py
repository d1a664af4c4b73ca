import os
from concurrent.futures import Future

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from paginggrid.models.paging_controller import PagingController


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


class FakeDataSource:
    """Scripted data source: each load_page() call consumes one queued response."""

    def __init__(self):
        self.calls = []
        self.is_end_list = False
        self._responses = []

    def queue_page(self, items, is_end_list=False):
        self._responses.append((list(items), is_end_list, None))
        return self

    def queue_error(self, error):
        self._responses.append((None, None, error))
        return self

    def load_page(self, is_refresh=False):
        self.calls.append(is_refresh)
        items, is_end_list, error = self._responses.pop(0)
        if error is not None:
            raise error
        self.is_end_list = is_end_list
        return items


class FakeExecutor:
    """
    Runs submitted work immediately but keeps the future pending until the
    test calls finish(), so tests decide the order completions arrive in.
    """

    def __init__(self, *, fail=False):
        self.fail = fail
        self.jobs = []
        self.shutdown_calls = []

    def submit(self, fn, *args, **kwargs):
        if self.fail:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future = Future()
        try:
            outcome = (fn(*args, **kwargs), None)
        except Exception as e:
            outcome = (None, e)
        self.jobs.append((future, outcome))
        return future

    @property
    def pending(self):
        return len(self.jobs)

    def finish(self, index=0):
        future, (result, error) = self.jobs.pop(index)
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)
        return future

    def finish_all(self):
        while self.jobs:
            self.finish(0)

    def shutdown(self, wait=True, cancel_futures=False):
        self.shutdown_calls.append((wait, cancel_futures))


class RecordingFlowLog:
    def __init__(self):
        self.events = []

    def __call__(self, component, message, **kwargs):
        self.events.append((component, message, kwargs))

    def messages(self, level=None):
        return [message for _, message, kwargs in self.events
                if level is None or kwargs.get("level") == level]


@pytest.fixture
def fake_source():
    return FakeDataSource()


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def failing_executor():
    return FakeExecutor(fail=True)


@pytest.fixture
def flow_log():
    return RecordingFlowLog()


@pytest.fixture
def controller(fake_source, fake_executor, flow_log):
    instance = PagingController(fake_source, executor=fake_executor, flow_log=flow_log)
    states = []
    instance.state_changed.connect(states.append)
    instance.observed_states = states
    yield instance
    instance.dispose()
