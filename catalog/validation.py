"""Rule-string form validation.

    rules = {
        "title": "required|notempty|max:255",
        "image": "required|file|image|mimes:jpg,jpeg,png|max_file_size:5242880",
    }
    v = Validator(data, rules)
    if v.fails():
        errors = v.first_errors()

Every rule in a field's list is evaluated in order and each failing rule adds
one message. A field without ``required`` whose value is blank skips its
remaining rules.
"""
from __future__ import annotations

import os
import re
from datetime import date

from werkzeug.datastructures import FileStorage

_INT_RE = re.compile(r"^[+-]?\d+$")

# Leading bytes of the image formats we accept
_IMAGE_SIGNATURES = (
    b"\xff\xd8\xff",
    b"\x89PNG\r\n\x1a\n",
    b"GIF87a",
    b"GIF89a",
)


def _label(field: str) -> str:
    return field.replace("_", " ")


def is_upload(value) -> bool:
    return isinstance(value, FileStorage) and bool(value.filename)


def upload_size(file: FileStorage) -> int:
    stream = file.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def _head(file: FileStorage, n: int = 16) -> bytes:
    stream = file.stream
    pos = stream.tell()
    stream.seek(0)
    head = stream.read(n)
    stream.seek(pos)
    return head


def looks_like_image(file: FileStorage) -> bool:
    head = _head(file)
    if head.startswith(_IMAGE_SIGNATURES):
        return True
    return head[:4] == b"RIFF" and head[8:12] == b"WEBP"


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, FileStorage):
        return not value.filename
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


class Validator:
    def __init__(self, data: dict, rules: dict):
        self.data = data
        self.rules = rules
        self._errors: dict[str, list[str]] | None = None

    def fails(self) -> bool:
        return bool(self.errors())

    def passes(self) -> bool:
        return not self.fails()

    def errors(self) -> dict[str, list[str]]:
        if self._errors is None:
            self._errors = self._run()
        return self._errors

    def first_errors(self) -> dict[str, str]:
        return {field: msgs[0] for field, msgs in self.errors().items()}

    def _run(self) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        for field, rule_string in self.rules.items():
            rules = [r for r in rule_string.split("|") if r]
            names = [r.split(":", 1)[0] for r in rules]
            value = self.data.get(field)
            if "required" not in names and _is_blank(value):
                continue
            for rule in rules:
                name, _, arg = rule.partition(":")
                check = getattr(self, f"_check_{name}", None)
                if check is None:
                    raise ValueError(f"Unknown validation rule: {name}")
                message = check(field, value, arg)
                if message:
                    errors.setdefault(field, []).append(message)
        return errors

    # Each check returns an error message or None.

    def _check_required(self, field, value, arg):
        if value is None or (isinstance(value, FileStorage) and not value.filename):
            return f"The {_label(field)} field is required."

    def _check_notempty(self, field, value, arg):
        if isinstance(value, str) and value.strip() == "":
            return f"The {_label(field)} field must not be empty."
        if isinstance(value, (list, tuple)) and not value:
            return f"The {_label(field)} field must not be empty."

    def _size_of(self, value):
        if isinstance(value, str):
            return len(value), "characters"
        if isinstance(value, (list, tuple)):
            return len(value), "items"
        number = _number(value)
        if number is not None:
            return number, None
        return None, None

    def _check_min(self, field, value, arg):
        size, unit = self._size_of(value)
        if size is None:
            return None
        limit = float(arg)
        if size < limit:
            suffix = f" {unit}" if unit else ""
            return f"The {_label(field)} field must be at least {arg}{suffix}."

    def _check_max(self, field, value, arg):
        size, unit = self._size_of(value)
        if size is None:
            return None
        limit = float(arg)
        if size > limit:
            suffix = f" {unit}" if unit else ""
            return f"The {_label(field)} field must not be greater than {arg}{suffix}."

    def _check_integer(self, field, value, arg):
        if isinstance(value, bool):
            return f"The {_label(field)} field must be an integer."
        if isinstance(value, int):
            return None
        if isinstance(value, str) and _INT_RE.match(value.strip()):
            return None
        return f"The {_label(field)} field must be an integer."

    def _check_numeric(self, field, value, arg):
        if _number(value) is not None:
            return None
        try:
            float(str(value))
        except (TypeError, ValueError):
            return f"The {_label(field)} field must be a number."

    def _check_date(self, field, value, arg):
        if isinstance(value, date):
            return None
        try:
            date.fromisoformat(str(value).strip())
        except (TypeError, ValueError):
            return f"The {_label(field)} field must be a valid date (YYYY-MM-DD)."

    def _check_array(self, field, value, arg):
        if not isinstance(value, (list, tuple)):
            return f"The {_label(field)} field must be a list."

    def _check_file(self, field, value, arg):
        if not is_upload(value):
            return f"The {_label(field)} field must be an uploaded file."

    def _check_image(self, field, value, arg):
        if not is_upload(value) or not looks_like_image(value):
            return f"The {_label(field)} field must be an image."

    def _check_mimes(self, field, value, arg):
        allowed = [a.strip().lower() for a in arg.split(",") if a.strip()]
        ext = ""
        if is_upload(value):
            ext = os.path.splitext(value.filename)[1].lstrip(".").lower()
        if ext not in allowed:
            return f"The {_label(field)} field must be a file of type: {', '.join(allowed)}."

    def _check_max_file_size(self, field, value, arg):
        if not is_upload(value):
            return f"The {_label(field)} field must be an uploaded file."
        if upload_size(value) > int(arg):
            return f"The {_label(field)} field must not be larger than {int(arg)} bytes."
