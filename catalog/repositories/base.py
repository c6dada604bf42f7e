from __future__ import annotations

from dataclasses import fields

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from catalog.errors import PersistenceError


# Largest value a signed 64-bit INTEGER column can hold
MAX_ID = 2**63 - 1


def parse_id(value):
    """Return the positive int spelled by ``value``, or None if it isn't one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text_value = str(value).strip()
    if not text_value.isdigit():
        return None
    value = int(text_value)
    return value if value > 0 else None


def coerce_id(value):
    """Return an id usable as a bound parameter, or None for anything that can't be one."""
    value = parse_id(value)
    if value is None or value > MAX_ID:
        return None
    return value


class Repository:
    """Table-bound data access shared by every catalog entity.

    Subclasses set ``model`` (a ``db.Model``), ``record_cls`` and
    ``order_column``. The repository only executes statements; committing is
    left to whoever owns the session.
    """

    model = None
    record_cls = None
    order_column = "name"
    entity = "record"

    def __init__(self, session):
        self.session = session

    @property
    def table(self):
        return self.model.__table__

    @property
    def mutable_fields(self):
        return [f.name for f in fields(self.record_cls) if f.name != "id"]

    def _records(self, stmt):
        return [self.record_cls.from_row(row._mapping) for row in self.session.execute(stmt)]

    def _ordered(self, stmt):
        return stmt.order_by(self.table.c[self.order_column], self.table.c.id)

    def find_all(self):
        return self._records(self._ordered(select(self.table)))

    def find_by_id(self, record_id):
        record_id = coerce_id(record_id)
        if record_id is None:
            return None
        row = self.session.execute(
            select(self.table).where(self.table.c.id == record_id)
        ).first()
        return self.record_cls.from_row(row._mapping) if row else None

    def exists(self, record_id) -> bool:
        record_id = coerce_id(record_id)
        if record_id is None:
            return False
        count = self.session.execute(
            select(func.count()).select_from(self.table).where(self.table.c.id == record_id)
        ).scalar_one()
        return count > 0

    def save(self, record):
        values = {name: getattr(record, name) for name in self.mutable_fields}
        try:
            if record.id:
                result = self.session.execute(
                    update(self.table).where(self.table.c.id == record.id).values(**values)
                )
                # 0 means the row vanished, >1 would mean a broken key
                if result.rowcount != 1:
                    raise PersistenceError(f"Failed to save {self.entity}.")
            else:
                result = self.session.execute(insert(self.table).values(**values))
                pk = result.inserted_primary_key
                if not pk or pk[0] is None:
                    raise PersistenceError(f"Failed to save {self.entity}.")
                record.id = pk[0]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save {self.entity}: {e}") from e
        return record

    def delete(self, record) -> bool:
        """False when the record has no id or no row matched it."""
        if not record.id:
            return False
        try:
            result = self.session.execute(delete(self.table).where(self.table.c.id == record.id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete {self.entity}: {e}") from e
        return result.rowcount > 0
