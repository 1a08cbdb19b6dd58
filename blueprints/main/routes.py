from datetime import datetime, timezone

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    url_for,
)
from sqlalchemy.exc import SQLAlchemyError

from extensions import db, upload_storage
from forms import DeclarationEntryForm, IMAGE_EXTENSIONS
from services.declarations import (
    DeclarationStoreError,
    create_declarations,
    list_declarations,
)
from services.grouping import group_declarations

bp = Blueprint("main", __name__)


@bp.app_template_filter("timestamp")
def format_timestamp(value) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%B %d, %Y, %I:%M %p UTC")


@bp.route("/")
def home():
    try:
        declarations = list_declarations()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error fetching declarations")
        return render_template(
            "declarations_list.html",
            groups=[],
            load_error="Failed to load declarations. Please try again later.",
        ), 500

    return render_template(
        "declarations_list.html",
        groups=group_declarations(declarations),
        load_error=None,
    )


@bp.route("/declarations/new", methods=["GET", "POST"])
def new_declaration():
    form = DeclarationEntryForm()

    if form.validate_on_submit():
        try:
            result = create_declarations(form.to_submission(), upload_storage.get())
        except DeclarationStoreError:
            flash("Failed to submit declaration. Please try again.", "danger")
        else:
            flash(result.message, "success")
            return redirect(url_for("main.home"))

    return render_template(
        "declaration_form.html",
        form=form,
        image_extensions=IMAGE_EXTENSIONS,
        max_screenshot_size=current_app.config["MAX_SCREENSHOT_SIZE"],
    )


@bp.route("/uploads/<path:filename>")
def uploaded_file(filename: str):
    return upload_storage.get().send(filename)
