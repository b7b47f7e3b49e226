# tests/conftest.py
import os
import logging
import pytest

from actionhub.core import log
from actionhub.core import metrics
from actionhub.core.registry import ActionRegistry, clear_active


@pytest.fixture(scope="session", autouse=True)
def _bootstrap_logging_and_metrics():
    # reads LOG_LEVEL / LOG_JSON / .env
    log.setup()

    interval = float(os.getenv("METRICS_INTERVAL_TEST", "1.0"))
    json_mode = (os.getenv("LOG_JSON", "0") == "1")
    metrics.start_exporter(interval_sec=interval, json_mode=json_mode,
                           logger=logging.getLogger("actionhub.metrics"))
    yield
    metrics.stop_exporter()


@pytest.fixture(autouse=True)
def _fresh_state():
    metrics.reset()
    clear_active()
    yield
    clear_active()


@pytest.fixture
def registry():
    return ActionRegistry(name="actionhub.test.registry")


class Recorder:
    """Handler that remembers every call, tagged with its own label."""
    def __init__(self, label="h", calls=None):
        self.label = label
        self.calls = calls if calls is not None else []

    def __call__(self, action_name, action_data):
        self.calls.append((self.label, action_name, action_data))


@pytest.fixture
def recorder_factory():
    shared = []

    def make(label):
        return Recorder(label, shared)

    make.calls = shared
    return make
