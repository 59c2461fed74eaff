import json
from datetime import datetime, timezone

import httpx
import pytest

from borrowing_service.services.event_service import EventService, NullEventService

pytestmark = pytest.mark.usefixtures("app")


def _service(handler):
    return EventService(
        "http://localhost:3500",
        pubsub_name="pubsub",
        transport=httpx.MockTransport(handler),
    )


def test_publish_returned_posts_to_topic():
    seen = []

    def handler(request):
        seen.append((request.url.path, json.loads(request.read())))
        return httpx.Response(204)

    ok = _service(handler).publish_returned("u1", "b1", datetime(2025, 5, 15, 9, 30, tzinfo=timezone.utc))

    assert ok is True
    assert seen == [(
        "/v1.0/publish/pubsub/book-returned",
        {"userId": "u1", "bookId": "b1", "returnDate": "2025-05-15T09:30:00Z"},
    )]


def test_publish_overdue_payload():
    seen = []

    def handler(request):
        seen.append((request.url.path, json.loads(request.read())))
        return httpx.Response(204)

    borrowed = datetime(2025, 5, 1, 14, 0, tzinfo=timezone.utc)
    due = datetime(2025, 5, 15, 14, 0, tzinfo=timezone.utc)
    assert _service(handler).publish_overdue("u1", "b1", borrowed, due) is True

    assert seen[0][0] == "/v1.0/publish/pubsub/book-overdue"
    assert seen[0][1]["dueDate"] == "2025-05-15T14:00:00Z"


def test_publish_failure_is_swallowed():
    assert _service(lambda request: httpx.Response(500)).publish_returned(
        "u1", "b1", datetime(2025, 5, 1, tzinfo=timezone.utc)
    ) is False


def test_unreachable_bus_is_swallowed():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert _service(handler).publish_overdue(
        "u1", "b1", datetime(2025, 5, 1, tzinfo=timezone.utc), datetime(2025, 5, 15, tzinfo=timezone.utc)
    ) is False


def test_null_event_service_never_fails():
    assert NullEventService().publish_returned("u1", "b1", datetime(2025, 5, 1, tzinfo=timezone.utc)) is True


def test_publish_failure_is_logged_on_app_logger(app, caplog):
    with caplog.at_level("WARNING", logger=app.logger.name):
        _service(lambda request: httpx.Response(503)).publish_returned(
            "u1", "b1", datetime(2025, 5, 1, tzinfo=timezone.utc)
        )

    assert any(
        r.name == app.logger.name and "[events] book-returned" in r.getMessage() for r in caplog.records
    )
