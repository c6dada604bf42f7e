from __future__ import annotations

from flask import current_app

from catalog.errors import CatalogError, NotFoundError, RequestError
from catalog.repositories.base import parse_id
from catalog.repositories.book_platform_repo import BookPlatformRepo
from catalog.repositories.book_repo import BookRepo
from catalog.repositories.format_repo import FormatRepo
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo
from catalog.repositories.publisher_repo import PublisherRepo
from catalog.services.book_service import stripped, validate

NAME_RULES = {"name": "required|notempty|max:255"}


def read_name_form(form) -> dict:
    return {"name": stripped(form.get("name"))}


class NamedEntityService:
    """Create/update/delete for the single-column lookup tables."""

    repo_cls = None

    def __init__(self, session):
        self.session = session
        self.repo = self.repo_cls(session)
        self.books = BookRepo(session)

    @property
    def entity(self) -> str:
        return self.repo.entity

    def get(self, record_id):
        if parse_id(record_id) is None:
            raise RequestError(f"No valid {self.entity} ID provided.")
        record = self.repo.find_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity.capitalize()} not found.")
        return record

    def books_for(self, record):
        return []

    def before_delete(self, record) -> None:
        pass

    def _write(self, *steps) -> None:
        # single commit point; anything raised rolls the whole request back
        try:
            for step in steps:
                step()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def store(self, data: dict):
        validate(data, NAME_RULES)
        record = self.repo.record_cls(name=data["name"])
        self._write(lambda: self.repo.save(record))
        current_app.logger.info(f"[{type(self).__name__}] Stored {self.entity} {record.id}")
        return record

    def update(self, record_id, data: dict):
        record = self.get(record_id)
        validate(data, NAME_RULES)
        record.name = data["name"]
        self._write(lambda: self.repo.save(record))
        current_app.logger.info(f"[{type(self).__name__}] Updated {self.entity} {record.id}")
        return record

    def delete(self, record_id):
        record = self.get(record_id)
        self._write(lambda: self.before_delete(record), lambda: self.repo.delete(record))
        current_app.logger.info(f"[{type(self).__name__}] Deleted {self.entity} {record.id}")
        return record


class GenreService(NamedEntityService):
    repo_cls = GenreRepo

    def books_for(self, record):
        return self.books.find_by_genre(record.id)

    def before_delete(self, record):
        in_use = self.books.count_by_genre(record.id)
        if in_use:
            raise CatalogError(f"Genre is still used by {in_use} book(s).")


class PlatformService(NamedEntityService):
    repo_cls = PlatformRepo

    def books_for(self, record):
        return self.books.find_by_platform(record.id)

    def before_delete(self, record):
        BookPlatformRepo(self.session, self.repo).delete_for_platform(record.id)


class PublisherService(NamedEntityService):
    repo_cls = PublisherRepo


class FormatService(NamedEntityService):
    repo_cls = FormatRepo
