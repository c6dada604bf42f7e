from sqlalchemy import func, select

from catalog.models.book import Book
from catalog.models.book_platform import BookPlatform
from catalog.records import BookRecord
from catalog.repositories.base import Repository, coerce_id


class BookRepo(Repository):
    model = Book
    record_cls = BookRecord
    order_column = "title"
    entity = "book"

    def find_by_genre(self, genre_id):
        genre_id = coerce_id(genre_id)
        if genre_id is None:
            return []
        return self._records(self._ordered(
            select(self.table).where(self.table.c.genre_id == genre_id)
        ))

    def find_by_platform(self, platform_id):
        platform_id = coerce_id(platform_id)
        if platform_id is None:
            return []
        bp = BookPlatform.__table__
        stmt = (
            select(self.table)
            .join(bp, bp.c.book_id == self.table.c.id)
            .where(bp.c.platform_id == platform_id)
        )
        return self._records(self._ordered(stmt))

    def count_by_genre(self, genre_id) -> int:
        return self.session.execute(
            select(func.count()).select_from(self.table).where(self.table.c.genre_id == genre_id)
        ).scalar_one()

    def referenced_images(self) -> set:
        rows = self.session.execute(
            select(self.table.c.image_filename).where(self.table.c.image_filename.is_not(None))
        )
        return {r[0] for r in rows}
