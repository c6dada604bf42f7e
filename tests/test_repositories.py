from datetime import date

import pytest

from catalog.errors import PersistenceError
from catalog.records import BookRecord, FormatRecord, GenreRecord, PublisherRecord
from catalog.repositories.base import MAX_ID, coerce_id, parse_id
from catalog.repositories.book_platform_repo import BookPlatformRepo
from catalog.repositories.book_repo import BookRepo
from catalog.repositories.format_repo import FormatRepo
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo
from catalog.repositories.publisher_repo import PublisherRepo


def make_book(genre_id, title="Dune", **kw):
    fields = dict(
        title=title,
        release_date=date(1965, 8, 1),
        genre_id=genre_id,
        description="Desert planet, spice and politics.",
        image_filename="abc.png",
    )
    fields.update(kw)
    return BookRecord(**fields)


def test_insert_assigns_positive_id(lookups, session):
    book = BookRepo(session).save(make_book(lookups["Fantasy"]))
    assert isinstance(book.id, int)
    assert book.id > 0


def test_save_then_find_round_trip(lookups, session):
    repo = BookRepo(session)
    book = repo.save(make_book(lookups["Fantasy"]))
    session.commit()

    found = repo.find_by_id(book.id)
    assert found == book


def test_resave_updates_instead_of_inserting(lookups, session):
    repo = BookRepo(session)
    book = repo.save(make_book(lookups["Fantasy"]))
    first_id = book.id

    repo.save(book)
    book.title = "Dune Messiah"
    repo.save(book)
    session.commit()

    assert book.id == first_id
    books = repo.find_all()
    assert len(books) == 1
    assert books[0].title == "Dune Messiah"


def test_update_of_missing_row_raises(lookups, session):
    ghost = make_book(lookups["Fantasy"], id=4242)
    with pytest.raises(PersistenceError, match="Failed to save book"):
        BookRepo(session).save(ghost)


def test_store_rejection_is_wrapped(session):
    # name is NOT NULL
    with pytest.raises(PersistenceError) as exc_info:
        GenreRepo(session).save(GenreRecord(name=None))
    assert exc_info.value.__cause__ is not None


def test_delete_without_id_is_a_noop(session):
    assert GenreRepo(session).delete(GenreRecord(name="Horror")) is False


def test_delete_missing_row_reports_failure(session):
    assert GenreRepo(session).delete(GenreRecord(id=999, name="Nope")) is False


def test_delete_removes_row(session):
    repo = PublisherRepo(session)
    publisher = repo.save(PublisherRecord(name="Ace"))
    assert repo.delete(publisher) is True
    assert repo.find_by_id(publisher.id) is None


@pytest.mark.parametrize("bad_id", [999, "999", "abc", "", None, 0, -1, "1; DROP TABLE genres", "99999999999999999999"])
def test_find_by_id_misses_return_none(session, bad_id):
    assert GenreRepo(session).find_by_id(bad_id) is None


def test_find_all_orders_by_display_column(session):
    repo = FormatRepo(session)
    for name in ("Paperback", "Audiobook", "Hardcover"):
        repo.save(FormatRecord(name=name))
    assert [f.name for f in repo.find_all()] == ["Audiobook", "Hardcover", "Paperback"]


def test_find_by_genre_filters_and_orders(lookups, session):
    repo = BookRepo(session)
    repo.save(make_book(lookups["Fantasy"], title="Zelazny"))
    repo.save(make_book(lookups["Fantasy"], title="Abercrombie"))
    repo.save(make_book(lookups["Mystery"], title="Christie"))

    assert [b.title for b in repo.find_by_genre(lookups["Fantasy"])] == ["Abercrombie", "Zelazny"]
    assert repo.find_by_genre("nope") == []
    assert repo.count_by_genre(lookups["Mystery"]) == 1


def test_find_by_platform_and_find_by_book_join(lookups, session):
    books = BookRepo(session)
    links = BookPlatformRepo(session)
    b1 = books.save(make_book(lookups["Fantasy"], title="Beta"))
    b2 = books.save(make_book(lookups["Fantasy"], title="Alpha"))
    links.create(b1.id, lookups["Nook"])
    links.create(b1.id, lookups["Kindle"])
    links.create(b2.id, lookups["Kindle"])

    assert [b.title for b in books.find_by_platform(lookups["Kindle"])] == ["Alpha", "Beta"]
    assert [b.title for b in books.find_by_platform(lookups["Kobo"])] == []
    assert [p.name for p in PlatformRepo(session).find_by_book(b1.id)] == ["Kindle", "Nook"]


def test_referenced_images(lookups, session):
    repo = BookRepo(session)
    repo.save(make_book(lookups["Fantasy"], image_filename="one.png"))
    repo.save(make_book(lookups["Fantasy"], image_filename=None))
    assert repo.referenced_images() == {"one.png"}


def test_to_dict_mirrors_fields(lookups):
    book = make_book(lookups["Fantasy"], id=7)
    assert book.to_dict() == {
        "id": 7,
        "title": "Dune",
        "release_date": "1965-08-01",
        "genre_id": lookups["Fantasy"],
        "description": "Desert planet, spice and politics.",
        "image_filename": "abc.png",
    }
    assert GenreRecord(id=1, name="Horror").to_dict() == {"id": 1, "name": "Horror"}


def test_from_row_fills_missing_keys():
    assert GenreRecord.from_row({"id": 3}) == GenreRecord(id=3, name=None)
    assert GenreRecord.from_row(None) is None


def test_coerce_id():
    assert coerce_id("12") == 12
    assert coerce_id(" 5 ") == 5
    assert coerce_id(True) is None
    assert coerce_id("1.5") is None


def test_ids_past_the_integer_column_range_are_misses(session):
    assert coerce_id(str(MAX_ID)) == MAX_ID
    assert coerce_id(MAX_ID + 1) is None
    assert parse_id("99999999999999999999") == 99999999999999999999
    assert GenreRepo(session).exists("99999999999999999999") is False
    assert BookRepo(session).find_by_genre("99999999999999999999") == []
