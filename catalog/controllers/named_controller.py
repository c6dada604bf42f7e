# catalog/controllers/named_controller.py
"""Blueprints for the lookup tables (genres, publishers, formats, platforms).

They all hold a single ``name`` column, so one route set serves every table.
"""

from flask import Blueprint, current_app, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from catalog.errors import CatalogError, ValidationFailed
from catalog.extensions import db
from catalog.repositories.base import coerce_id
from catalog.services.named_service import (
    FormatService,
    GenreService,
    PlatformService,
    PublisherService,
    read_name_form,
)
from catalog.utils.forms import (
    clear_form_data,
    clear_form_errors,
    flash_error,
    flash_success,
    pop_form_state,
    remember_failed_submission,
)


def make_named_blueprint(name: str, service_cls, title: str, plural: str) -> Blueprint:
    bp = Blueprint(name, __name__, url_prefix=f"/{name}")
    labels = {"endpoint": name, "title": title, "plural": plural}

    def service():
        return service_cls(db.session)

    @bp.get("/")
    def index():
        return render_template("named/index.html", records=service().repo.find_all(), **labels)

    @bp.get("/view")
    def view():
        svc = service()
        try:
            record = svc.get(request.args.get("id"))
        except CatalogError as e:
            flash_error(str(e))
            return redirect(url_for(f"{name}.index"))
        return render_template("named/view.html", record=record, books=svc.books_for(record), **labels)

    @bp.get("/create")
    def create():
        return render_template("named/form.html", record=None, form=pop_form_state(), **labels)

    @bp.get("/edit")
    def edit():
        try:
            record = service().get(request.args.get("id"))
        except CatalogError as e:
            flash_error(str(e))
            return redirect(url_for(f"{name}.index"))
        return render_template("named/form.html", record=record, form=pop_form_state(), **labels)

    def _submit(action, back):
        data = read_name_form(request.form)
        try:
            record = action(data)
        except ValidationFailed as e:
            remember_failed_submission(str(e), data, e.errors)
            return redirect(back)
        except CatalogError as e:
            remember_failed_submission(str(e), data)
            return redirect(back)
        except SQLAlchemyError as e:
            current_app.logger.exception(f"[{name}] {e}")
            remember_failed_submission(f"Could not save the {title.lower()}.", data)
            return redirect(back)

        clear_form_data()
        clear_form_errors()
        flash_success(f"{title} saved successfully.")
        return redirect(url_for(f"{name}.view", id=record.id))

    @bp.post("/store")
    def store():
        return _submit(service().store, url_for(f"{name}.create"))

    @bp.post("/update")
    def update():
        record_id = request.form.get("id")
        clean_id = coerce_id(record_id)
        back = url_for(f"{name}.edit", id=clean_id) if clean_id else url_for(f"{name}.index")
        return _submit(lambda data: service().update(record_id, data), back)

    @bp.post("/delete")
    def delete():
        try:
            service().delete(request.form.get("id"))
        except CatalogError as e:
            flash_error(str(e))
        except SQLAlchemyError as e:
            current_app.logger.exception(f"[{name}.delete] {e}")
            flash_error(f"Could not delete the {title.lower()}.")
        else:
            flash_success(f"{title} deleted successfully.")
        return redirect(url_for(f"{name}.index"))

    return bp


genre_bp = make_named_blueprint("genres", GenreService, "Genre", "Genres")
publisher_bp = make_named_blueprint("publishers", PublisherService, "Publisher", "Publishers")
format_bp = make_named_blueprint("formats", FormatService, "Format", "Formats")
platform_bp = make_named_blueprint("platforms", PlatformService, "Platform", "Platforms")
