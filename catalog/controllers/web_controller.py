from flask import Blueprint, jsonify, redirect, request, url_for

from catalog.utils.forms import flash_error

web_bp = Blueprint("web", __name__)


@web_bp.get("/")
def root():
    return redirect(url_for("books.index"))


# Old-style links from the previous PHP pages
@web_bp.get("/index.php")
def index_redirect():
    return redirect(url_for("books.index"))


def method_not_allowed(_error):
    # API callers get JSON
    if request.path.startswith("/api"):
        return jsonify({"success": False, "message": "Invalid request method."}), 405
    flash_error("Invalid request method.")
    return redirect(url_for("books.index"))
