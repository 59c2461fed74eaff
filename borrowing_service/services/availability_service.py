# borrowing_service/services/availability_service.py
from __future__ import annotations

from urllib.parse import quote

import httpx
from flask import current_app

from borrowing_service.errors import NotFoundError, UpstreamUnavailable, ValidationError


def book_path(book_id: str) -> str:
    """bookId tek path segmenti olarak kodlanır ("/", "?", "#", ".." başka kaynağa gitmesin)."""
    segment = quote(book_id, safe="")
    # "." ve ".." quote'tan aynen çıkar; httpx bunları normalize eder
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return f"/books/{segment}"


class AvailabilityService:
    """
    Uzak kitap servisine ince HTTP proxy.
    - GET  /books/<book_id>  -> {"available": bool, ...}
    - PUT  /books/<book_id>  <- {"available": bool}
    Retry yok: her çağrı tek sefer.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config) -> "AvailabilityService":
        return cls(config["BOOK_SERVICE_URL"], timeout=config["BOOK_SERVICE_TIMEOUT"])

    def _request(self, method: str, book_id: str, **kwargs) -> httpx.Response:
        path = book_path(book_id)
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.InvalidURL as e:
            raise ValidationError(f"Geçersiz bookId: {book_id!r}") from e
        except httpx.RequestError as e:
            current_app.logger.warning(f"[availability] {method} {path} ulaşılamadı: {e}")
            raise UpstreamUnavailable(f"Kitap servisine ulaşılamadı: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Kitap bulunamadı: {book_id}")
        # redirect takip edilmiyor: 3xx de başarısız sayılır
        if not response.is_success:
            current_app.logger.warning(f"[availability] {method} {path} -> {response.status_code}")
            raise UpstreamUnavailable(f"Kitap servisi hata döndü ({response.status_code})")
        return response

    def is_available(self, book_id: str) -> bool:
        response = self._request("GET", book_id)
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamUnavailable("Kitap servisi geçersiz JSON döndü") from e

        available = body.get("available") if isinstance(body, dict) else None
        if not isinstance(available, bool):
            raise UpstreamUnavailable("Kitap servisi yanıtında 'available' alanı yok")
        return available

    def set_available(self, book_id: str, available: bool) -> None:
        self._request("PUT", book_id, json={"available": bool(available)})

    def close(self):
        self._client.close()
