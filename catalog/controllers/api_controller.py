# catalog/controllers/api_controller.py

from flask import Blueprint, jsonify

from catalog.extensions import db
from catalog.repositories.book_platform_repo import BookPlatformRepo
from catalog.repositories.book_repo import BookRepo
from catalog.repositories.format_repo import FormatRepo
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo
from catalog.repositories.publisher_repo import PublisherRepo

api_bp = Blueprint("api", __name__, url_prefix="/api")

NAMED_REPOS = {
    "genres": GenreRepo,
    "publishers": PublisherRepo,
    "formats": FormatRepo,
    "platforms": PlatformRepo,
}


def _json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def _list(records):
    return jsonify({"success": True, "data": [r.to_dict() for r in records]})


@api_bp.get("/books")
def books_list():
    return _list(BookRepo(db.session).find_all())


@api_bp.get("/books/<int:book_id>")
def book_detail(book_id: int):
    book = BookRepo(db.session).find_by_id(book_id)
    if book is None:
        return _json_error("Book not found.", 404)
    data = book.to_dict()
    data["platform_ids"] = BookPlatformRepo(db.session).platform_ids(book.id)
    return jsonify({"success": True, "data": data})


@api_bp.get("/<any(genres, publishers, formats, platforms):kind>")
def named_list(kind: str):
    return _list(NAMED_REPOS[kind](db.session).find_all())


@api_bp.get("/<any(genres, publishers, formats, platforms):kind>/<int:record_id>")
def named_detail(kind: str, record_id: int):
    repo = NAMED_REPOS[kind](db.session)
    record = repo.find_by_id(record_id)
    if record is None:
        return _json_error(f"{repo.entity.capitalize()} not found.", 404)
    return jsonify({"success": True, "data": record.to_dict()})


@api_bp.get("/genres/<int:genre_id>/books")
def genre_books(genre_id: int):
    if not GenreRepo(db.session).exists(genre_id):
        return _json_error("Genre not found.", 404)
    return _list(BookRepo(db.session).find_by_genre(genre_id))


@api_bp.get("/platforms/<int:platform_id>/books")
def platform_books(platform_id: int):
    if not PlatformRepo(db.session).exists(platform_id):
        return _json_error("Platform not found.", 404)
    return _list(BookRepo(db.session).find_by_platform(platform_id))
