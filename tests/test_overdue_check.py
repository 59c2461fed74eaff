from datetime import timedelta

from borrowing_service.errors import StoreError
from borrowing_service.models.borrow_record import BorrowRecord
from borrowing_service.repositories.borrow_repo import BorrowRepo
from borrowing_service.tasks.overdue_check import run_overdue_check_job
from borrowing_service.tasks.scheduler import start_scheduler
from tests.conftest import NOW


def test_job_publishes_overdue_events(app, events):
    BorrowRepo.insert(BorrowRecord(user_id="u1", book_id="b1", borrow_date=NOW - timedelta(days=30)))

    assert run_overdue_check_job(app) == 1
    assert [topic for topic, _ in events.published] == ["book-overdue"]


def test_job_logs_and_survives_errors(app, service, monkeypatch):
    def broken(cutoff):
        raise StoreError("db down")

    monkeypatch.setattr(service.repo, "list_older_than", broken)

    assert run_overdue_check_job(app) == -1


def test_scheduler_disabled_in_tests(app):
    assert start_scheduler(app) is None
    assert "apscheduler" not in app.extensions
