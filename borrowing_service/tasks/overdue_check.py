# borrowing_service/tasks/overdue_check.py


def run_overdue_check_job(app) -> int:
    """
    Gecikmiş ödünç kayıtlarını bulur, her biri için overdue event'i yayınlar.
    Aynı kayıt gecikmede kaldıkça her çalışmada tekrar yayınlanır.
    return: gecikmiş kayıt sayısı (hata olursa -1)
    """
    with app.app_context():
        try:
            overdue = app.extensions["borrow_service"].list_overdue()
            app.logger.info(f"[overdue_check] overdue={len(overdue)}")
            return len(overdue)
        except Exception as e:
            app.logger.exception(f"[overdue_check] Hata: {e}")
            return -1
