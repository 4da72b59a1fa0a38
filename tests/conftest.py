"""
tests/conftest.py — pytest fixtures for the JSON Oracle integration service
"""
import pytest

from app import create_app
from extensions import get_services
from pipeline import AnalysisPipeline
from pipeline.notifications import NotificationDispatcher
from store import IntegrationStore, ResultLog


class FakeInference:
    """Stands in for the model server; records every call."""

    def __init__(self, response="", error=None, hook=None):
        self.response = response
        self.error = error
        self.hook = hook
        self.calls = []

    def generate(self, model, prompt):
        self.calls.append((model, prompt))
        if self.hook:
            self.hook()
        if self.error:
            raise self.error
        return self.response


class RecordingSender:
    """Notification sender that records deliveries and fails for chosen URLs."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    def send(self, url, result):
        if url in self.fail_for:
            raise ConnectionError(f"refused: {url}")
        self.sent.append((url, result.id))


# ── Core services, no Flask ──────────────────────────────────────────────────

@pytest.fixture()
def results():
    return ResultLog()


@pytest.fixture()
def store(results):
    return IntegrationStore(results)


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def dispatcher(sender):
    d = NotificationDispatcher(sender, max_workers=2)
    yield d
    d.shutdown(wait=True)


@pytest.fixture()
def inference():
    return FakeInference(response="We see a pattern and recommend you optimize")


@pytest.fixture()
def pipeline(store, results, inference, dispatcher):
    return AnalysisPipeline(store, results, inference, dispatcher)


# ── Flask app ────────────────────────────────────────────────────────────────

@pytest.fixture()
def app():
    """A fresh app per test so registries never leak between tests."""
    application = create_app("testing")
    with application.app_context():
        yield application
        get_services().dispatcher.shutdown(wait=True)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def services(app):
    return get_services()


@pytest.fixture()
def app_inference(services):
    fake = FakeInference(response="We see a pattern and recommend you optimize")
    services.pipeline.inference = fake
    return fake
