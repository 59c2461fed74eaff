from flask import Blueprint, current_app, jsonify, request

from borrowing_service.errors import ValidationError
from borrowing_service.utils.clock import iso_z

borrow_bp = Blueprint("borrow", __name__)


def _service():
    return current_app.extensions["borrow_service"]


def _ids_from_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON gövde bekleniyor: {userId, bookId}")
    return data.get("userId"), data.get("bookId")


@borrow_bp.post("/borrow")
def borrow_book():
    user_id, book_id = _ids_from_body()
    record = _service().borrow(user_id, book_id)
    return jsonify({
        "success": True,
        "message": "Kitap ödünç alındı",
        "borrowId": record.id,
        "dueDate": iso_z(record.due_date),
    }), 201


@borrow_bp.put("/return")
def return_book():
    user_id, book_id = _ids_from_body()
    _service().return_book(user_id, book_id)
    return jsonify({"success": True, "message": "Kitap iade edildi"})


# statik route, /borrowings/<user_id>'den önce eşleşir
@borrow_bp.get("/borrowings/overdue")
def overdue_borrowings():
    records = _service().list_overdue()
    return jsonify([
        {
            "userId": r.user_id,
            "bookId": r.book_id,
            "borrowDate": iso_z(r.borrowed_at),
            "dueDate": iso_z(r.due_date),
        } for r in records
    ])


@borrow_bp.get("/borrowings/<user_id>")
def user_borrowings(user_id: str):
    records = _service().list_borrowed(user_id)
    return jsonify([
        {
            "bookId": r.book_id,
            "borrowDate": iso_z(r.borrowed_at),
            "dueDate": iso_z(r.due_date),
        } for r in records
    ])
