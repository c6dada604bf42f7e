import click
from sqlalchemy.exc import SQLAlchemyError

from catalog.extensions import db
from catalog.records import FormatRecord, GenreRecord, PlatformRecord, PublisherRecord
from catalog.repositories.format_repo import FormatRepo
from catalog.repositories.genre_repo import GenreRepo
from catalog.repositories.platform_repo import PlatformRepo
from catalog.repositories.publisher_repo import PublisherRepo

# register every table on db.metadata
import catalog.models.book  # noqa: F401
import catalog.models.book_platform  # noqa: F401

DEFAULT_ROWS = {
    GenreRepo: (GenreRecord, ["Action", "Adventure", "Fantasy", "Mystery", "Science Fiction"]),
    PublisherRepo: (PublisherRecord, ["Penguin", "HarperCollins", "Tor Books"]),
    FormatRepo: (FormatRecord, ["Hardcover", "Paperback", "E-book", "Audiobook"]),
    PlatformRepo: (PlatformRecord, ["Kindle", "Kobo", "Apple Books", "Google Play Books"]),
}


def ensure_tables(app):
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("[db_setup] Tables ensured.")
        except SQLAlchemyError as e:
            app.logger.error(f"[db_setup] Error: {e}")
            raise


def seed_defaults(session) -> int:
    """Insert the default lookup rows into empty tables; returns rows added."""
    added = 0
    for repo_cls, (record_cls, names) in DEFAULT_ROWS.items():
        repo = repo_cls(session)
        if repo.find_all():
            continue
        for name in names:
            repo.save(record_cls(name=name))
            added += 1
    session.commit()
    return added


def register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        db.create_all()
        click.echo("Tables created.")

    @app.cli.command("seed")
    def seed_command():
        """Fill empty lookup tables with default rows."""
        added = seed_defaults(db.session)
        click.echo(f"Inserted {added} row(s).")

    @app.cli.command("sweep-images")
    @click.option("--grace", type=int, default=None, help="Minimum file age in seconds.")
    def sweep_images_command(grace):
        """Delete stored images no book refers to."""
        from catalog.tasks.orphan_sweep import sweep_orphan_images

        removed = sweep_orphan_images(grace_seconds=grace)
        click.echo(f"Removed {len(removed)} orphaned image(s).")
