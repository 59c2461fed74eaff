from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from borrowing_service.errors import StoreError
from borrowing_service.extensions import db
from borrowing_service.models.borrow_record import BorrowRecord
from borrowing_service.utils.clock import to_naive_utc


class BorrowRepo:
    """Her metod tek statement + tek commit."""

    @staticmethod
    def insert(record: BorrowRecord) -> int:
        record.borrow_date = to_naive_utc(record.borrow_date)
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"Ödünç kaydı yazılamadı: {e}") from e
        return record.id

    @staticmethod
    def delete_by_user_and_book(user_id: str, book_id: str) -> int:
        try:
            count = BorrowRecord.query.filter_by(user_id=user_id, book_id=book_id).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"Ödünç kaydı silinemedi: {e}") from e
        return count

    @staticmethod
    def list_by_user(user_id: str) -> list[BorrowRecord]:
        try:
            return (
                BorrowRecord.query.filter_by(user_id=user_id)
                .order_by(BorrowRecord.borrow_date, BorrowRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"Ödünç kayıtları okunamadı: {e}") from e

    @staticmethod
    def list_older_than(cutoff: datetime) -> list[BorrowRecord]:
        try:
            return (
                BorrowRecord.query.filter(BorrowRecord.borrow_date < to_naive_utc(cutoff))
                .order_by(BorrowRecord.borrow_date, BorrowRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(f"Gecikmiş kayıtlar okunamadı: {e}") from e
