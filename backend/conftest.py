import json
from datetime import datetime, timedelta, timezone

import pytest
import requests

from app_builder.config import Settings
from app_builder.db.repository import RecordStore
from app_builder.db.session import make_engine
from app_builder.errors import PersistenceError
from app_builder.inference.base import ModelGateway, ResponseFormat
from app_builder.pipeline.requirements import RequirementsPipeline


COURSE_APP = {
    "appName": "Course Manager",
    "entities": ["Student", "Course", "Grade"],
    "roles": ["Teacher", "Student", "Admin"],
    "features": ["Add course", "Enroll students", "View reports"],
}


class StubGateway(ModelGateway):
    """Returns canned outputs in order, or raises `error` on every call."""

    def __init__(self, outputs=(), error=None, backend="local",
                 response_format=ResponseFormat.RAW_WITH_COMMENTARY):
        self.outputs = list(outputs)
        self.error = error
        self.backend = backend
        self.response_format = response_format
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.outputs.pop(0)


class SpyStore:
    def __init__(self, error=None):
        self.saved = []
        self.error = error

    def save(self, record):
        if self.error is not None:
            raise self.error
        self.saved.append(record)
        return f"id-{len(self.saved)}"

    def load_all(self):
        return []


class FakeClock:
    def __init__(self, start=datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def course_app_json():
    return json.dumps(COURSE_APP)


@pytest.fixture
def store():
    store = RecordStore(make_engine("sqlite://"), clock=FakeClock())
    store.create_schema()
    return store


@pytest.fixture
def spy_store():
    return SpyStore()


@pytest.fixture
def failing_store():
    return SpyStore(error=PersistenceError("database unavailable"))


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://")


@pytest.fixture
def make_pipeline():
    def _make(*outputs, error=None, **kwargs):
        gateway = StubGateway(outputs, error=error, **kwargs)
        return RequirementsPipeline(gateway), gateway

    return _make
