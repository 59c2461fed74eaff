# borrowing_service/errors.py
from flask import jsonify


class LibraryError(Exception):
    status_code = 500
    default_message = "Beklenmeyen hata"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(LibraryError):
    status_code = 400
    default_message = "Geçersiz istek"


class NotFoundError(LibraryError):
    status_code = 404
    default_message = "Kayıt bulunamadı"


class BookUnavailableError(LibraryError):
    status_code = 409
    default_message = "Bu kitap şu anda mevcut değil"


class UpstreamUnavailable(LibraryError):
    status_code = 502
    default_message = "Kitap servisine ulaşılamadı"


class StoreError(LibraryError):
    status_code = 500
    default_message = "Veritabanı hatası"


class PublishError(LibraryError):
    """Event bus hatası. Handler'a kadar gelmez, publisher içinde loglanıp yutulur."""
    default_message = "Event yayınlanamadı"


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def _library_error(e: LibraryError):
        if e.status_code >= 500:
            app.logger.error(f"[error] {type(e).__name__}: {e.message}")
        return jsonify({"success": False, "message": e.message}), e.status_code
