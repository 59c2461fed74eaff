from datetime import datetime, timedelta

from flask import current_app, has_app_context

from borrowing_service.extensions import db
from borrowing_service.utils.clock import to_aware_utc

DEFAULT_LOAN_PERIOD_DAYS = 14


def loan_period_days() -> int:
    if has_app_context():
        return int(current_app.config.get("LOAN_PERIOD_DAYS", DEFAULT_LOAN_PERIOD_DAYS))
    return DEFAULT_LOAN_PERIOD_DAYS


def due_date_for(borrow_date: datetime, days: int | None = None) -> datetime:
    if days is None:
        days = loan_period_days()
    return borrow_date + timedelta(days=days)


class BorrowRecord(db.Model):
    __tablename__ = "borrow_records"

    id = db.Column(db.Integer, primary_key=True)

    # FK yok: user/book doğrulaması kitap servisine ait
    user_id = db.Column(db.String(64), nullable=False, index=True)
    book_id = db.Column(db.String(64), nullable=False, index=True)

    # naive UTC; oluşturulduktan sonra değişmez
    borrow_date = db.Column(db.DateTime, nullable=False, index=True)

    @property
    def borrowed_at(self) -> datetime:
        return to_aware_utc(self.borrow_date)

    @property
    def due_date(self) -> datetime:
        # saklanmaz, okurken hesaplanır
        return due_date_for(self.borrowed_at)

    def __repr__(self):
        return f"<BorrowRecord {self.id} user={self.user_id} book={self.book_id}>"
