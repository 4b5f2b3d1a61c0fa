# modules/vehicles/makes/routes.py
from flask import Blueprint, render_template, redirect, url_for, request, flash

from modules.vehicles.makes.forms import MakeForm
from modules.vehicles.resources import MAKES
from modules.vehicles.services import get_record
from modules.vehicles.views import (
    ListControlsForm,
    apply_result_errors,
    dispatcher_for,
    flash_delete_result,
    form_confirmation,
    list_state_from_request,
    load_page,
    render_not_found,
)

bp = Blueprint("makes", __name__, url_prefix="/vehicle-makes", template_folder="templates")


# 🗂️ List with filter, sort and paging
@bp.route("/")
def index():
    state = list_state_from_request(MAKES)
    page, error = load_page(MAKES, state)
    return render_template(
        "makes/index.html",
        resource=MAKES,
        state=state,
        page=page,
        error=error,
        form=ListControlsForm(MAKES, state),
        create_url=url_for("makes.create"),
    )


# ➕ Create
@bp.route("/create", methods=["GET", "POST"])
def create():
    form = MakeForm()
    if form.validate_on_submit():
        result = dispatcher_for(MAKES).create({"name": form.name.data, "abrv": form.abrv.data})
        if result.ok:
            flash("Manufacturer added", "success")
            return redirect(url_for("makes.index"))
        apply_result_errors(form, result)
        if not result.errors:
            flash(result.message, "danger")
    return render_template("makes/form.html", form=form, action="Create Vehicle Manufacturer")


# ✏️ Edit
@bp.route("/edit/<int:id>", methods=["GET", "POST"])
def edit(id):
    make = get_record(MAKES, id)
    if make is None:
        return render_not_found(MAKES)

    form = MakeForm(data=make)
    if form.validate_on_submit():
        result = dispatcher_for(MAKES).update(id, {"name": form.name.data, "abrv": form.abrv.data})
        if result.ok:
            flash("Manufacturer updated", "success")
            return redirect(url_for("makes.index"))
        apply_result_errors(form, result)
        if not result.errors:
            flash(result.message, "danger")
    return render_template("makes/form.html", form=form, action="Edit Vehicle Manufacturer", is_edit=True)


# 🗑️ Delete: GET asks, POST performs
@bp.route("/delete/<int:id>", methods=["GET", "POST"])
def delete(id):
    if request.method == "GET":
        make = get_record(MAKES, id)
        if make is None:
            return render_not_found(MAKES)
        return render_template(
            "confirm_delete.html",
            message=MAKES.confirm_delete_message,
            record_label=make.get("name"),
            cancel_url=url_for("makes.index"),
        )

    result = dispatcher_for(MAKES).delete(id, confirm=form_confirmation)
    flash_delete_result(result, "Manufacturer deleted")
    return redirect(url_for("makes.index"))
