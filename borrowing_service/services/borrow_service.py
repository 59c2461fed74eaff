# borrowing_service/services/borrow_service.py
from __future__ import annotations

from datetime import timedelta
from typing import Callable

from flask import current_app

from borrowing_service.errors import BookUnavailableError, NotFoundError, UpstreamUnavailable, ValidationError
from borrowing_service.models.borrow_record import BorrowRecord, loan_period_days
from borrowing_service.repositories.borrow_repo import BorrowRepo
from borrowing_service.utils.clock import utc_now


def _validate_id(name: str, value) -> str:
    # id'ler opak: olduğu gibi saklanır, baş/son boşluk kabul edilmez
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} zorunlu")
    if value != value.strip():
        raise ValidationError(f"{name} baş/son boşluk içeremez")
    return value


class BorrowService:
    """
    Ödünç alma / iade akışını sıralar:
    uzak durum kontrolü -> lokal yazma -> uzak durum güncelleme -> event.

    Kısmi hata politikası:
    - borrow: insert sonrası set_available(False) patlarsa kayıt KALIR (rollback yok),
      uyarı loglanır ve UpstreamUnavailable yukarı çıkar.
    - return: delete sonrası set_available(True) patlarsa kayıt geri eklenmez.
    - event hataları yutulur (EventService içinde loglanır).

    Teslim süresi tek yerden gelir: LOAN_PERIOD_DAYS (BorrowRecord.due_date).
    """

    def __init__(self, availability, events, repo=BorrowRepo, clock: Callable = utc_now):
        self.availability = availability
        self.events = events
        self.repo = repo
        self.clock = clock

    def borrow(self, user_id: str, book_id: str) -> BorrowRecord:
        user_id = _validate_id("userId", user_id)
        book_id = _validate_id("bookId", book_id)

        # hata olursa (NotFound / Upstream) lokal state'e dokunmadan çık
        if not self.availability.is_available(book_id):
            raise BookUnavailableError(f"Kitap şu anda mevcut değil: {book_id}")

        record = BorrowRecord(user_id=user_id, book_id=book_id, borrow_date=self.clock())
        self.repo.insert(record)

        try:
            self.availability.set_available(book_id, False)
        except (UpstreamUnavailable, NotFoundError) as e:
            # kayıt kalıyor: lokal "ödünçte", uzakta hâlâ "mevcut" -> sonradan mutabakat
            current_app.logger.warning(
                f"[borrow] Tutarsızlık: record_id={record.id} book={book_id} "
                f"kaydedildi ama kitap servisi güncellenemedi: {e.message}"
            )
            raise UpstreamUnavailable(
                f"Ödünç kaydedildi ama kitap durumu güncellenemedi: {e.message}"
            ) from e

        current_app.logger.info(f"[borrow] user={user_id} book={book_id} record_id={record.id}")
        return record

    def return_book(self, user_id: str, book_id: str) -> None:
        user_id = _validate_id("userId", user_id)
        book_id = _validate_id("bookId", book_id)

        deleted = self.repo.delete_by_user_and_book(user_id, book_id)
        if deleted == 0:
            raise NotFoundError(f"Ödünç kaydı bulunamadı: user={user_id} book={book_id}")

        try:
            self.availability.set_available(book_id, True)
        except (UpstreamUnavailable, NotFoundError) as e:
            current_app.logger.warning(
                f"[return] Tutarsızlık: user={user_id} book={book_id} silindi "
                f"ama kitap servisi güncellenemedi: {e.message}"
            )
            raise UpstreamUnavailable(
                f"İade kaydedildi ama kitap durumu güncellenemedi: {e.message}"
            ) from e

        self.events.publish_returned(user_id, book_id, self.clock())
        current_app.logger.info(f"[return] user={user_id} book={book_id}")

    def list_borrowed(self, user_id: str) -> list[BorrowRecord]:
        return self.repo.list_by_user(_validate_id("userId", user_id))

    def list_overdue(self) -> list[BorrowRecord]:
        cutoff = self.clock() - timedelta(days=loan_period_days())
        overdue = self.repo.list_older_than(cutoff)

        # her çağrıda tekrar yayınlanır (dedup yok)
        for record in overdue:
            self.events.publish_overdue(record.user_id, record.book_id, record.borrowed_at, record.due_date)
        return overdue
