"""Plain data records passed between repositories, services and views.

Records carry no database handle; repositories hydrate them from rows and
write them back.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Mapping


@dataclass
class _Record:
    @classmethod
    def from_row(cls, row: Mapping[str, Any] | None):
        if row is None:
            return None
        return cls(**{f.name: row.get(f.name) for f in fields(cls)})

    def to_dict(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, date):
                value = value.isoformat()
            out[f.name] = value
        return out


@dataclass
class BookRecord(_Record):
    id: int | None = None
    title: str | None = None
    release_date: date | None = None
    genre_id: int | None = None
    description: str | None = None
    image_filename: str | None = None


@dataclass
class GenreRecord(_Record):
    id: int | None = None
    name: str | None = None


@dataclass
class PublisherRecord(_Record):
    id: int | None = None
    name: str | None = None


@dataclass
class FormatRecord(_Record):
    id: int | None = None
    name: str | None = None


@dataclass
class PlatformRecord(_Record):
    id: int | None = None
    name: str | None = None
