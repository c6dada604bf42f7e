from __future__ import annotations

import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage


class ImageUpload:
    """Stores validated uploads under one directory and removes them again."""

    def __init__(self, directory: str):
        self.directory = directory

    @classmethod
    def from_config(cls):
        return cls(current_app.config["IMAGE_UPLOAD_DIR"])

    @staticmethod
    def _is_plain_name(filename) -> bool:
        return bool(filename) and os.path.basename(filename) == filename and filename not in (".", "..")

    def path_for(self, filename: str) -> str | None:
        if not self._is_plain_name(filename):
            return None
        return os.path.join(self.directory, filename)

    def process(self, file: FileStorage) -> str | None:
        """Save the upload under a generated name; returns the name or None."""
        ext = os.path.splitext(file.filename or "")[1].lower()
        filename = f"{uuid.uuid4().hex}{ext}"
        try:
            os.makedirs(self.directory, exist_ok=True)
            file.stream.seek(0)
            file.save(os.path.join(self.directory, filename))
        except OSError as e:
            current_app.logger.error(f"[ImageUpload] Could not store {file.filename!r}: {e}")
            return None
        current_app.logger.info(f"[ImageUpload] Stored {filename}")
        return filename

    def delete_image(self, filename: str | None) -> bool:
        """Best-effort removal; never raises."""
        path = self.path_for(filename)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            current_app.logger.warning(f"[ImageUpload] Could not delete {filename}: {e}")
            return False
        current_app.logger.info(f"[ImageUpload] Deleted {filename}")
        return True
