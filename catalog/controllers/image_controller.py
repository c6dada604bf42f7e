from flask import Blueprint, current_app, send_from_directory

image_bp = Blueprint("images", __name__, url_prefix="/images")


@image_bp.get("/<path:filename>")
def show(filename: str):
    # send_from_directory 404s on names escaping the directory
    return send_from_directory(current_app.config["IMAGE_UPLOAD_DIR"], filename)
