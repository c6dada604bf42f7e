from __future__ import annotations

from datetime import date

from flask import current_app

from catalog.errors import NotFoundError, RequestError, UploadError, ValidationFailed
from catalog.records import BookRecord
from catalog.repositories.base import parse_id
from catalog.repositories.book_platform_repo import BookPlatformRepo
from catalog.repositories.book_repo import BookRepo
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo
from catalog.services.image_upload import ImageUpload
from catalog.validation import Validator, is_upload


def book_rules(require_image: bool, config=None) -> dict:
    config = config or current_app.config
    image = (
        f"file|image|mimes:{config['ALLOWED_IMAGE_EXTENSIONS']}"
        f"|max_file_size:{config['MAX_IMAGE_SIZE']}"
    )
    return {
        "title": "required|notempty|min:1|max:255",
        "release_date": "required|notempty|date",
        "genre_id": "required|integer",
        "description": "required|notempty|min:10|max:5000",
        "platform_ids": "required|array|min:1|max:10",
        "image": ("required|" + image) if require_image else image,
    }


def stripped(value):
    return value.strip() if isinstance(value, str) else value


def read_book_form(form, files) -> dict:
    return {
        "title": stripped(form.get("title")),
        "release_date": stripped(form.get("release_date")),
        "genre_id": stripped(form.get("genre_id")),
        "description": stripped(form.get("description")),
        "platform_ids": form.getlist("platform_ids"),
        "image": files.get("image"),
    }


# Pipeline stages. Each takes plain values and raises on failure.

def validate(data: dict, rules: dict) -> None:
    validator = Validator(data, rules)
    if validator.fails():
        raise ValidationFailed(validator.first_errors())


def resolve_genre(genres: GenreRepo, genre_id):
    genre = genres.find_by_id(genre_id)
    if genre is None:
        raise NotFoundError("Selected genre does not exist.")
    return genre


def apply_fields(book: BookRecord, data: dict) -> BookRecord:
    book.title = data["title"]
    book.release_date = date.fromisoformat(data["release_date"])
    book.genre_id = int(data["genre_id"])
    book.description = data["description"]
    return book


def store_upload(uploader: ImageUpload, file) -> str:
    filename = uploader.process(file)
    if not filename:
        raise UploadError("Failed to process and save the image.")
    return filename


class BookService:
    def __init__(self, session, uploader: ImageUpload):
        self.session = session
        self.uploader = uploader
        self.books = BookRepo(session)
        self.genres = GenreRepo(session)
        self.platforms = PlatformRepo(session)
        self.links = BookPlatformRepo(session, self.platforms)

    def get_book(self, book_id) -> BookRecord:
        if parse_id(book_id) is None:
            raise RequestError("No valid book ID provided.")
        book = self.books.find_by_id(book_id)
        if book is None:
            raise NotFoundError("Book not found.")
        return book

    def _finish(self, book: BookRecord, platform_ids, new_image: str | None):
        """Persist -> associate -> commit; rolls back and drops ``new_image`` on failure."""
        try:
            self.books.save(book)
            _linked, dropped = self.links.replace(book.id, platform_ids)
            self.session.commit()
        except Exception:
            self.session.rollback()
            if new_image:
                self.uploader.delete_image(new_image)
            raise
        if dropped:
            current_app.logger.warning(
                f"[BookService] Book {book.id}: ignored unknown platform ids {dropped}"
            )
        return dropped

    def store(self, data: dict) -> tuple[BookRecord, list]:
        validate(data, book_rules(require_image=True))
        resolve_genre(self.genres, data["genre_id"])

        book = apply_fields(BookRecord(), data)
        book.image_filename = store_upload(self.uploader, data["image"])

        dropped = self._finish(book, data["platform_ids"], book.image_filename)
        current_app.logger.info(f"[BookService] Stored book {book.id}")
        return book, dropped

    def update(self, book_id, data: dict) -> tuple[BookRecord, list]:
        book = self.get_book(book_id)
        validate(data, book_rules(require_image=False))
        resolve_genre(self.genres, data["genre_id"])

        apply_fields(book, data)
        old_image = book.image_filename
        new_image = None
        if is_upload(data.get("image")):
            new_image = store_upload(self.uploader, data["image"])
            book.image_filename = new_image

        dropped = self._finish(book, data["platform_ids"], new_image)
        if new_image and old_image:
            self.uploader.delete_image(old_image)
        current_app.logger.info(f"[BookService] Updated book {book.id}")
        return book, dropped

    def delete(self, book_id) -> BookRecord:
        book = self.get_book(book_id)
        try:
            self.links.delete_for_book(book.id)
            self.books.delete(book)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        if book.image_filename:
            self.uploader.delete_image(book.image_filename)
        current_app.logger.info(f"[BookService] Deleted book {book.id}")
        return book
