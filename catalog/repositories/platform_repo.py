from sqlalchemy import select

from catalog.models.book_platform import BookPlatform
from catalog.models.platform import Platform
from catalog.records import PlatformRecord
from catalog.repositories.base import Repository, coerce_id


class PlatformRepo(Repository):
    model = Platform
    record_cls = PlatformRecord
    entity = "platform"

    def find_by_book(self, book_id):
        book_id = coerce_id(book_id)
        if book_id is None:
            return []
        bp = BookPlatform.__table__
        stmt = (
            select(self.table)
            .join(bp, bp.c.platform_id == self.table.c.id)
            .where(bp.c.book_id == book_id)
        )
        return self._records(self._ordered(stmt))
