from catalog.extensions import db


class Format(db.Model):
    __tablename__ = "formats"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
