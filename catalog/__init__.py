from flask import Flask, jsonify

from catalog.config import Config
from catalog.extensions import db, migrate


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) Database handle first; everything below needs db.engine / db.session
    db.init_app(app)
    migrate.init_app(app, db)

    from catalog.db_setup import ensure_tables, register_commands
    if app.config.get("AUTO_CREATE_TABLES"):
        ensure_tables(app)
    register_commands(app)

    # 2) Page blueprints
    from catalog.controllers.web_controller import web_bp, method_not_allowed
    from catalog.controllers.book_controller import book_bp
    from catalog.controllers.named_controller import format_bp, genre_bp, platform_bp, publisher_bp
    from catalog.controllers.image_controller import image_bp
    from catalog.controllers.api_controller import api_bp
    app.register_blueprint(web_bp)
    app.register_blueprint(book_bp)
    app.register_blueprint(genre_bp)
    app.register_blueprint(publisher_bp)
    app.register_blueprint(format_bp)
    app.register_blueprint(platform_bp)
    app.register_blueprint(image_bp)
    app.register_blueprint(api_bp)

    app.register_error_handler(405, method_not_allowed)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    # 3) Background orphan image sweep (off unless ORPHAN_SWEEP_ENABLED)
    from catalog.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
