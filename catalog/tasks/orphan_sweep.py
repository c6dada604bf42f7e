# catalog/tasks/orphan_sweep.py
from __future__ import annotations

import os
import time

from flask import current_app

from catalog.extensions import db
from catalog.repositories.book_repo import BookRepo
from catalog.services.image_upload import ImageUpload


def find_orphans(directory: str, referenced: set, grace_seconds: int, now: float | None = None) -> list[str]:
    """Files in ``directory`` no book points at and older than the grace period.

    The grace period keeps files written by an in-flight request (stored but
    not yet committed) out of the result.
    """
    if not os.path.isdir(directory):
        return []
    now = time.time() if now is None else now
    orphans = []
    for entry in sorted(os.listdir(directory)):
        path = os.path.join(directory, entry)
        if entry in referenced or entry.startswith(".") or not os.path.isfile(path):
            continue
        if now - os.path.getmtime(path) < grace_seconds:
            continue
        orphans.append(entry)
    return orphans


def sweep_orphan_images(grace_seconds: int | None = None) -> list[str]:
    """Delete unreferenced images. Must run inside an app context."""
    config = current_app.config
    if grace_seconds is None:
        grace_seconds = config["ORPHAN_SWEEP_GRACE_SECONDS"]

    uploader = ImageUpload.from_config()
    referenced = BookRepo(db.session).referenced_images()
    removed = [
        name
        for name in find_orphans(uploader.directory, referenced, grace_seconds)
        if uploader.delete_image(name)
    ]
    if removed:
        current_app.logger.info(f"[orphan_sweep] Removed {len(removed)} orphaned image(s).")
    return removed


def run_orphan_sweep_job(app):
    with app.app_context():
        try:
            return sweep_orphan_images()
        except Exception as e:
            app.logger.exception(f"[orphan_sweep] Error: {e}")
            return []
        finally:
            db.session.remove()
