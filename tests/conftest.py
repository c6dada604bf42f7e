import io

import pytest

from catalog import create_app
from catalog.config import TestConfig
from catalog.extensions import db
from catalog.records import GenreRecord, PlatformRecord
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
def app(upload_dir):
    class _Config(TestConfig):
        IMAGE_UPLOAD_DIR = str(upload_dir)

    app = create_app(_Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    """db.session inside a pushed app context."""
    with app.app_context():
        yield db.session
        db.session.remove()


@pytest.fixture
def lookups(app):
    """Two genres and three platforms, committed. Returns their ids by name."""
    with app.app_context():
        genres = GenreRepo(db.session)
        platforms = PlatformRepo(db.session)
        ids = {}
        for name in ("Mystery", "Fantasy"):
            ids[name] = genres.save(GenreRecord(name=name)).id
        for name in ("Kobo", "Kindle", "Nook"):
            ids[name] = platforms.save(PlatformRecord(name=name)).id
        db.session.commit()
        db.session.remove()
    return ids


def png_upload(name="cover.png", data=PNG_BYTES):
    return (io.BytesIO(data), name)


@pytest.fixture
def book_form(lookups):
    def _make(**overrides):
        form = {
            "title": "The Hollow Hills",
            "release_date": "1973-05-01",
            "genre_id": str(lookups["Fantasy"]),
            "description": "Second book of the Arthurian saga.",
            "platform_ids": [str(lookups["Kindle"])],
            "image": png_upload(),
        }
        form.update(overrides)
        return {k: v for k, v in form.items() if v is not None}

    return _make
