"""Old-input and field-error storage for redirect-after-POST forms.

A failed submission stores the submitted values and the first error per field
in the session; the next form render pops them exactly once.
"""
from __future__ import annotations

from flask import flash, session
from werkzeug.datastructures import FileStorage

FORM_DATA_KEY = "_form_data"
FORM_ERRORS_KEY = "_form_errors"


def set_form_data(data: dict) -> None:
    # uploads can't live in a cookie session
    session[FORM_DATA_KEY] = {
        k: v for k, v in (data or {}).items() if not isinstance(v, FileStorage)
    }


def set_form_errors(errors: dict) -> None:
    session[FORM_ERRORS_KEY] = dict(errors or {})


def clear_form_data() -> None:
    session.pop(FORM_DATA_KEY, None)


def clear_form_errors() -> None:
    session.pop(FORM_ERRORS_KEY, None)


def flash_error(message: str) -> None:
    flash(f"Error: {message}", "error")


def flash_success(message: str) -> None:
    flash(message, "success")


def remember_failed_submission(message: str, data: dict, errors: dict | None = None) -> None:
    flash_error(message)
    set_form_data(data)
    set_form_errors(errors or {})


class FormState:
    """Template helper wrapping one request's old input and errors."""

    def __init__(self, data: dict | None = None, errors: dict | None = None):
        self.data = data or {}
        self.errors = errors or {}

    def old(self, field, default=None):
        value = self.data.get(field)
        if value is None:
            return "" if default is None else default
        return value

    def error(self, field) -> str:
        return self.errors.get(field, "")

    def chosen(self, field, value, default=None) -> bool:
        current = self.data[field] if field in self.data else default
        if current is None:
            return False
        if isinstance(current, (list, tuple, set)):
            return str(value) in {str(c) for c in current}
        return str(value) == str(current)


def pop_form_state() -> FormState:
    return FormState(session.pop(FORM_DATA_KEY, None), session.pop(FORM_ERRORS_KEY, None))
