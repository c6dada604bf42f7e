# catalog/controllers/book_controller.py

from flask import Blueprint, current_app, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from catalog.errors import CatalogError, ValidationFailed
from catalog.extensions import db
from catalog.repositories.base import coerce_id
from catalog.services.book_service import BookService, read_book_form
from catalog.services.image_upload import ImageUpload
from catalog.utils.forms import (
    clear_form_data,
    clear_form_errors,
    flash_error,
    flash_success,
    pop_form_state,
    remember_failed_submission,
)

book_bp = Blueprint("books", __name__, url_prefix="/books")


def _service() -> BookService:
    return BookService(db.session, ImageUpload.from_config())


def _success_message(action: str, dropped) -> str:
    message = f"Book {action} successfully."
    if dropped:
        message += f" Ignored {len(dropped)} unknown platform(s)."
    return message


@book_bp.get("/")
def index():
    service = _service()
    genres = {g.id: g for g in service.genres.find_all()}
    return render_template("books/index.html", books=service.books.find_all(), genres=genres)


@book_bp.get("/view")
def view():
    service = _service()
    try:
        book = service.get_book(request.args.get("id"))
    except CatalogError as e:
        flash_error(str(e))
        return redirect(url_for("books.index"))

    return render_template(
        "books/view.html",
        book=book,
        genre=service.genres.find_by_id(book.genre_id),
        platforms=service.links.find_platforms(book.id),
    )


@book_bp.get("/create")
def create():
    service = _service()
    return render_template(
        "books/form.html",
        book=None,
        genres=service.genres.find_all(),
        platforms=service.platforms.find_all(),
        selected_platform_ids=[],
        form=pop_form_state(),
    )


@book_bp.post("/store")
def store():
    data = read_book_form(request.form, request.files)
    try:
        book, dropped = _service().store(data)
    except ValidationFailed as e:
        remember_failed_submission(str(e), data, e.errors)
        return redirect(url_for("books.create"))
    except CatalogError as e:
        remember_failed_submission(str(e), data)
        return redirect(url_for("books.create"))
    except SQLAlchemyError as e:
        current_app.logger.exception(f"[books.store] {e}")
        remember_failed_submission("Could not save the book.", data)
        return redirect(url_for("books.create"))

    clear_form_data()
    clear_form_errors()
    flash_success(_success_message("stored", dropped))
    return redirect(url_for("books.view", id=book.id))


@book_bp.get("/edit")
def edit():
    service = _service()
    try:
        book = service.get_book(request.args.get("id"))
    except CatalogError as e:
        flash_error(str(e))
        return redirect(url_for("books.index"))

    return render_template(
        "books/form.html",
        book=book,
        genres=service.genres.find_all(),
        platforms=service.platforms.find_all(),
        selected_platform_ids=service.links.platform_ids(book.id),
        form=pop_form_state(),
    )


@book_bp.post("/update")
def update():
    book_id = coerce_id(request.form.get("id"))
    data = read_book_form(request.form, request.files)
    back = url_for("books.edit", id=book_id) if book_id else url_for("books.index")
    try:
        book, dropped = _service().update(request.form.get("id"), data)
    except ValidationFailed as e:
        remember_failed_submission(str(e), data, e.errors)
        return redirect(back)
    except CatalogError as e:
        remember_failed_submission(str(e), data)
        return redirect(back)
    except SQLAlchemyError as e:
        current_app.logger.exception(f"[books.update] {e}")
        remember_failed_submission("Could not save the book.", data)
        return redirect(back)

    clear_form_data()
    clear_form_errors()
    flash_success(_success_message("updated", dropped))
    return redirect(url_for("books.view", id=book.id))


@book_bp.post("/delete")
def delete():
    try:
        _service().delete(request.form.get("id"))
    except CatalogError as e:
        flash_error(str(e))
    except SQLAlchemyError as e:
        current_app.logger.exception(f"[books.delete] {e}")
        flash_error("Could not delete the book.")
    else:
        flash_success("Book deleted successfully.")
    return redirect(url_for("books.index"))
