from datetime import datetime, timezone

import pytest

from borrowing_service import create_app
from borrowing_service.config import TestConfig
from borrowing_service.errors import NotFoundError
from borrowing_service.services.event_service import NullEventService

NOW = datetime(2025, 5, 20, 12, 0, 0, tzinfo=timezone.utc)


class FakeAvailability:
    """Kitap servisi yerine bellek içi durum + çağrı kaydı."""

    def __init__(self, books=None):
        self.books = dict(books or {})
        self.calls = []
        self.fail_on = set()  # {"is_available", "set_available"}
        self.error = None

    def _maybe_fail(self, name):
        if name in self.fail_on:
            raise self.error

    def is_available(self, book_id):
        self.calls.append(("is_available", book_id))
        self._maybe_fail("is_available")
        if book_id not in self.books:
            raise NotFoundError(f"Kitap bulunamadı: {book_id}")
        return self.books[book_id]

    def set_available(self, book_id, available):
        self.calls.append(("set_available", book_id, available))
        self._maybe_fail("set_available")
        self.books[book_id] = available


class RecordingEvents(NullEventService):
    def __init__(self):
        super().__init__()
        self.published = []

    def publish(self, topic, payload):
        self.published.append((topic, payload))


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def availability():
    return FakeAvailability({"b1": True, "b2": True, "b3": False})


@pytest.fixture
def events():
    return RecordingEvents()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(availability, events, clock):
    app = create_app(TestConfig, availability=availability, events=events, clock=clock)
    with app.app_context():
        yield app


@pytest.fixture
def service(app):
    return app.extensions["borrow_service"]


@pytest.fixture
def client(app):
    return app.test_client()
