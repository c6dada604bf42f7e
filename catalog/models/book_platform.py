from catalog.extensions import db


class BookPlatform(db.Model):
    __tablename__ = "book_platform"

    # composite PK keeps each (book, platform) pair unique
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), primary_key=True)
    platform_id = db.Column(db.Integer, db.ForeignKey("platforms.id"), primary_key=True, index=True)
