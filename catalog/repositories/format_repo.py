from catalog.models.format import Format
from catalog.records import FormatRecord
from catalog.repositories.base import Repository


class FormatRepo(Repository):
    model = Format
    record_cls = FormatRecord
    entity = "format"
