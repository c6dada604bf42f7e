# catalog/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Runs the orphan image sweep in the background.
    - Jobs run inside an app context.
    - Skipped in the Werkzeug reloader's watcher process so jobs don't run twice.
    - Shut down when the interpreter exits.
    """
    if not app.config.get("ORPHAN_SWEEP_ENABLED"):
        return None

    # The reloader starts two processes; only the one with WERKZEUG_RUN_MAIN=true serves requests
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from catalog.tasks.orphan_sweep import run_orphan_sweep_job

    minutes = app.config["ORPHAN_SWEEP_MINUTES"]
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        func=run_orphan_sweep_job,
        args=[app],
        trigger=IntervalTrigger(minutes=minutes),
        id="orphan_sweep_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120,
    )
    scheduler.start()
    app.logger.info(f"[scheduler] Orphan image sweep started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler

    def _shutdown():
        if scheduler.running:
            scheduler.shutdown(wait=False)
            app.logger.info("[scheduler] Scheduler shutdown.")

    atexit.register(_shutdown)
    return scheduler
