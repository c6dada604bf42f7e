from __future__ import annotations

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError

from catalog.errors import PersistenceError
from catalog.models.book_platform import BookPlatform
from catalog.repositories.base import coerce_id
from catalog.repositories.platform_repo import PlatformRepo


class BookPlatformRepo:
    """Rows of the book <-> platform join table."""

    def __init__(self, session, platforms: PlatformRepo | None = None):
        self.session = session
        self.platforms = platforms or PlatformRepo(session)

    @property
    def table(self):
        return BookPlatform.__table__

    def find_platforms(self, book_id):
        return self.platforms.find_by_book(book_id)

    def platform_ids(self, book_id) -> list[int]:
        rows = self.session.execute(
            select(self.table.c.platform_id)
            .where(self.table.c.book_id == book_id)
            .order_by(self.table.c.platform_id)
        )
        return [r[0] for r in rows]

    def exists(self, book_id, platform_id) -> bool:
        count = self.session.execute(
            select(func.count()).select_from(self.table).where(
                self.table.c.book_id == book_id,
                self.table.c.platform_id == platform_id,
            )
        ).scalar_one()
        return count > 0

    def create(self, book_id, platform_id) -> bool:
        """Link a pair. Returns False (and writes nothing) when the pair already exists."""
        if self.exists(book_id, platform_id):
            return False
        try:
            self.session.execute(insert(self.table).values(book_id=book_id, platform_id=platform_id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to link platform {platform_id}: {e}") from e
        return True

    def delete_for_book(self, book_id) -> None:
        try:
            self.session.execute(delete(self.table).where(self.table.c.book_id == book_id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to unlink platforms: {e}") from e

    def delete_for_platform(self, platform_id) -> None:
        try:
            self.session.execute(delete(self.table).where(self.table.c.platform_id == platform_id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to unlink books: {e}") from e

    def valid_platform_ids(self, platform_ids) -> tuple[list[int], list]:
        """Split submitted ids into (existing platform ids, rejected values), keeping order."""
        valid, dropped = [], []
        for raw in platform_ids or []:
            pid = coerce_id(raw)
            if pid is None or not self.platforms.exists(pid):
                dropped.append(raw)
            elif pid not in valid:
                valid.append(pid)
        return valid, dropped

    def replace(self, book_id, platform_ids) -> tuple[list[int], list]:
        """Make the book's links exactly the existing ids in ``platform_ids``.

        Runs inside a SAVEPOINT so a failure leaves the previous set intact;
        the enclosing transaction still has to be committed by the caller.
        Returns (linked ids, dropped values).
        """
        valid, dropped = self.valid_platform_ids(platform_ids)
        with self.session.begin_nested():
            self.delete_for_book(book_id)
            for pid in valid:
                self.create(book_id, pid)
        return valid, dropped
