import atexit

from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from borrowing_service.config import Config
from borrowing_service.errors import register_error_handlers
from borrowing_service.extensions import db


def create_app(config_object=Config, availability=None, events=None, clock=None):
    """
    availability / events / clock dışarıdan verilebilir (testlerde sahte servisler);
    verilmezse config'ten gerçek HTTP istemcileri kurulur.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) db init + tablo (migration yok)
    db.init_app(app)
    from borrowing_service.models import borrow_record  # noqa: F401
    with app.app_context():
        db.create_all()

    # 2) dış servisler + orkestratör
    from borrowing_service.services.availability_service import AvailabilityService
    from borrowing_service.services.borrow_service import BorrowService
    from borrowing_service.services.event_service import EventService, NullEventService
    from borrowing_service.utils.clock import utc_now

    # burada kurulan pooled httpx istemcileri proses kapanırken kapatılır
    if availability is None:
        availability = AvailabilityService.from_config(app.config)
        atexit.register(availability.close)
    if events is None:
        if app.config.get("EVENTS_ENABLED", True):
            events = EventService.from_config(app.config)
            atexit.register(events.close)
        else:
            events = NullEventService(app.config["RETURNED_TOPIC"], app.config["OVERDUE_TOPIC"])

    app.extensions["borrow_service"] = BorrowService(
        availability=availability,
        events=events,
        clock=clock or utc_now,
    )

    # 3) hata handler'ları + blueprint
    register_error_handlers(app)
    from borrowing_service.controllers.borrow_controller import borrow_bp
    app.register_blueprint(borrow_bp)

    @app.get("/health")
    def health():
        db_ok = True
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            db.session.rollback()
            db_ok = False
        return jsonify({"ok": True, "db": db_ok})

    # Scheduler (gecikme kontrol)
    from borrowing_service.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
