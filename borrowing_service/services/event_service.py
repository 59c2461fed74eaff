# borrowing_service/services/event_service.py
from __future__ import annotations

from datetime import datetime

import httpx
from flask import current_app

from borrowing_service.errors import PublishError
from borrowing_service.utils.clock import iso_z


class EventService:
    """
    Event bus'a (Dapr pub/sub HTTP API) best-effort bildirim.
    publish() hata fırlatır; publish_* yardımcıları hatayı loglayıp yutar.
    """

    def __init__(
        self,
        base_url: str,
        pubsub_name: str = "pubsub",
        returned_topic: str = "book-returned",
        overdue_topic: str = "book-overdue",
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.pubsub_name = pubsub_name
        self.returned_topic = returned_topic
        self.overdue_topic = overdue_topic
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config) -> "EventService":
        return cls(
            config["EVENT_BUS_URL"],
            pubsub_name=config["PUBSUB_NAME"],
            returned_topic=config["RETURNED_TOPIC"],
            overdue_topic=config["OVERDUE_TOPIC"],
            timeout=config["EVENT_BUS_TIMEOUT"],
        )

    def publish(self, topic: str, payload: dict) -> None:
        try:
            response = self._client.post(f"/v1.0/publish/{self.pubsub_name}/{topic}", json=payload)
        except httpx.RequestError as e:
            raise PublishError(f"Event bus'a ulaşılamadı: {e}") from e
        if response.is_error:
            raise PublishError(f"Event bus hata döndü ({response.status_code})")

    def _safe_publish(self, topic: str, payload: dict) -> bool:
        try:
            self.publish(topic, payload)
            return True
        except PublishError as e:
            current_app.logger.warning(f"[events] {topic} yayınlanamadı: {e.message}")
            return False

    def publish_returned(self, user_id: str, book_id: str, returned_at: datetime) -> bool:
        return self._safe_publish(
            self.returned_topic,
            {"userId": user_id, "bookId": book_id, "returnDate": iso_z(returned_at)},
        )

    def publish_overdue(self, user_id: str, book_id: str, borrow_date: datetime, due_date: datetime) -> bool:
        return self._safe_publish(
            self.overdue_topic,
            {
                "userId": user_id,
                "bookId": book_id,
                "borrowDate": iso_z(borrow_date),
                "dueDate": iso_z(due_date),
            },
        )

    def close(self):
        self._client.close()


class NullEventService(EventService):
    """EVENTS_ENABLED=0 veya testler için: hiçbir şey yayınlamaz."""

    def __init__(self, returned_topic: str = "book-returned", overdue_topic: str = "book-overdue"):
        self.pubsub_name = None
        self.returned_topic = returned_topic
        self.overdue_topic = overdue_topic
        self._client = None

    def publish(self, topic: str, payload: dict) -> None:
        current_app.logger.debug(f"[events] (kapalı) {topic}: {payload}")

    def close(self):
        pass
