import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///borrowing.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Kitap durum servisi (uzak)
    BOOK_SERVICE_URL = os.getenv("BOOK_SERVICE_URL", "http://localhost:8081")
    BOOK_SERVICE_TIMEOUT = float(os.getenv("BOOK_SERVICE_TIMEOUT", "5"))

    # Event bus (Dapr sidecar pub/sub)
    EVENT_BUS_URL = os.getenv("EVENT_BUS_URL", "http://localhost:3500")
    EVENT_BUS_TIMEOUT = float(os.getenv("EVENT_BUS_TIMEOUT", "5"))
    PUBSUB_NAME = os.getenv("PUBSUB_NAME", "pubsub")
    RETURNED_TOPIC = os.getenv("RETURNED_TOPIC", "book-returned")
    OVERDUE_TOPIC = os.getenv("OVERDUE_TOPIC", "book-overdue")
    EVENTS_ENABLED = _flag("EVENTS_ENABLED", "1")

    LOAN_PERIOD_DAYS = int(os.getenv("LOAN_PERIOD_DAYS", "14"))

    SCHEDULER_ENABLED = _flag("SCHEDULER_ENABLED", "1")
    OVERDUE_CHECK_MINUTES = int(os.getenv("OVERDUE_CHECK_MINUTES", "60"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    EVENTS_ENABLED = False
    SCHEDULER_ENABLED = False
