from catalog.models.genre import Genre
from catalog.records import GenreRecord
from catalog.repositories.base import Repository


class GenreRepo(Repository):
    model = Genre
    record_cls = GenreRecord
    entity = "genre"
