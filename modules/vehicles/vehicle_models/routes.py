# modules/vehicles/vehicle_models/routes.py
from flask import Blueprint, current_app, render_template, redirect, url_for, request, flash

from modules.vehicles.resources import MODELS
from modules.vehicles.services import fetch_all_makes, get_record, make_name
from modules.vehicles.vehicle_models.forms import VehicleModelForm
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
from rest_client import BackendError

bp = Blueprint("vehicle_models", __name__, url_prefix="/vehicle-models", template_folder="templates")


def _makes_or_empty():
    try:
        return fetch_all_makes()
    except BackendError as e:
        current_app.logger.warning("Loading manufacturer options failed: %s", e)
        return []


def _form_data(form):
    return {"name": form.name.data, "abrv": form.abrv.data, "make_id": form.make_id.data}


# 🗂️ List with filter, sort and paging
@bp.route("/")
def index():
    state = list_state_from_request(MODELS)
    page, error = load_page(MODELS, state)
    return render_template(
        "vehicle_models/index.html",
        resource=MODELS,
        state=state,
        page=page,
        error=error,
        form=ListControlsForm(MODELS, state),
        makes=_makes_or_empty(),
        make_name=make_name,
        create_url=url_for("vehicle_models.create"),
    )


# ➕ Create
@bp.route("/create", methods=["GET", "POST"])
def create():
    makes = fetch_all_makes()
    form = VehicleModelForm(makes=makes)
    if form.validate_on_submit():
        result = dispatcher_for(MODELS).create(_form_data(form))
        if result.ok:
            flash("Model added", "success")
            return redirect(url_for("vehicle_models.index"))
        apply_result_errors(form, result)
        if not result.errors:
            flash(result.message, "danger")
    return render_template("vehicle_models/form.html", form=form, action="Create Vehicle Model")


# ✏️ Edit
@bp.route("/edit/<int:id>", methods=["GET", "POST"])
def edit(id):
    model = get_record(MODELS, id)
    if model is None:
        return render_not_found(MODELS)

    makes = fetch_all_makes()
    form = VehicleModelForm(data=model, makes=makes)
    if form.validate_on_submit():
        result = dispatcher_for(MODELS).update(id, _form_data(form))
        if result.ok:
            flash("Model updated", "success")
            return redirect(url_for("vehicle_models.index"))
        apply_result_errors(form, result)
        if not result.errors:
            flash(result.message, "danger")
    return render_template(
        "vehicle_models/form.html",
        form=form,
        action="Edit Vehicle Model",
        is_edit=True,
        current_make=make_name(model),
    )


# 🗑️ Delete: GET asks, POST performs
@bp.route("/delete/<int:id>", methods=["GET", "POST"])
def delete(id):
    if request.method == "GET":
        model = get_record(MODELS, id)
        if model is None:
            return render_not_found(MODELS)
        return render_template(
            "confirm_delete.html",
            message=MODELS.confirm_delete_message,
            record_label=f"{make_name(model)} {model.get('name')}",
            cancel_url=url_for("vehicle_models.index"),
        )

    result = dispatcher_for(MODELS).delete(id, confirm=form_confirmation)
    flash_delete_result(result, "Model deleted")
    return redirect(url_for("vehicle_models.index"))
