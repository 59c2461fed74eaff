# borrowing_service/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Periyodik gecikme kontrolü.
    - SCHEDULER_ENABLED=0 ise hiç başlamaz.
    - Debug reloader'da çift çalışmayı engeller.
    - Proses kapanırken scheduler'ı kapatır.
    """
    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("[scheduler] Kapalı (SCHEDULER_ENABLED=0).")
        return None

    # Werkzeug reloader varsa WERKZEUG_RUN_MAIN=true olan process gerçek process'tir
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from borrowing_service.tasks.overdue_check import run_overdue_check_job

    minutes = int(app.config.get("OVERDUE_CHECK_MINUTES", 60))
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        func=run_overdue_check_job,
        args=[app],
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_check_job",
        replace_existing=True,
        max_instances=1,        # aynı job üst üste binmesin
        coalesce=True,          # kaçırılanları tek seferde toparla
        misfire_grace_time=120,
    )
    scheduler.start()
    app.logger.info(f"[scheduler] Overdue check job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler

    def _shutdown():
        if scheduler.running:
            scheduler.shutdown(wait=False)

    atexit.register(_shutdown)
    return scheduler
