from catalog.models.publisher import Publisher
from catalog.records import PublisherRecord
from catalog.repositories.base import Repository


class PublisherRepo(Repository):
    model = Publisher
    record_cls = PublisherRecord
    entity = "publisher"
