# modules/vehicles/views.py
"""Helpers shared by the make and model blueprints."""
from flask import current_app, flash, render_template, request
from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, SubmitField

from extensions import get_cache, get_client
from modules.vehicles.list_state import ListStateStore
from modules.vehicles.mutations import MutationDispatcher, MutationStatus
from modules.vehicles.query import QueryParameterError
from modules.vehicles.resources import PAGE_SIZE_OPTIONS
from modules.vehicles.services import ListPage, fetch_page
from rest_client import BackendError


class ListControlsForm(FlaskForm):
    """Filter, sort and page-size controls above a list (GET form)."""

    class Meta:
        csrf = False

    filter_field = SelectField('Filter by')
    filter_value = StringField('Filter')
    sort_field = SelectField('Sort By')
    sort_direction = SelectField('Direction', choices=[('asc', 'ASC'), ('desc', 'DESC')])
    page_size = SelectField('Items per page', coerce=int, choices=[(n, str(n)) for n in PAGE_SIZE_OPTIONS])
    submit = SubmitField('Apply')

    def __init__(self, resource, state, *args, **kwargs):
        super().__init__(*args, formdata=None, data=state.to_dict(), **kwargs)
        self.filter_field.choices = list(resource.filter_fields.items())
        self.sort_field.choices = list(resource.sort_fields.items())


def list_state_from_request(resource, storage=None):
    """Merge the request's list arguments into the persisted state and save it."""
    store = ListStateStore.for_resource(resource, storage)
    current = store.load()
    changes = store.clean_changes(request.args)
    if changes.get("filter_field", current.filter_field) != current.filter_field:
        # a text filter makes no sense for the new field (and vice versa)
        changes["filter_value"] = ""
    state = current.apply(**changes)
    if state != current:
        store.save(state)
    return state


def load_page(resource, state):
    """Returns (ListPage, error message or None); failures leave an empty table."""
    try:
        return fetch_page(resource, state), None
    except (BackendError, QueryParameterError) as e:
        current_app.logger.warning("Loading %s failed: %s", resource.table, e)
        return ListPage(page=state.page, page_size=state.page_size), resource.load_error_message


def dispatcher_for(resource):
    return MutationDispatcher(get_client(), get_cache(), resource)


def form_confirmation(message):
    # the confirmation page posts confirmed=yes; anything else means "no"
    return request.form.get("confirmed") == "yes"


def apply_result_errors(form, result):
    """Copy dispatcher validation errors onto the form fields."""
    for name, message in result.errors.items():
        field = getattr(form, name, None)
        if field is not None:
            field.errors = list(field.errors) + [message]


def render_not_found(resource):
    return render_template("not_found.html", message=resource.not_found_message), 404


def flash_delete_result(result, done_message):
    if result.status is MutationStatus.SUCCESS:
        flash(done_message, "info")
    elif result.status is MutationStatus.NOT_PERFORMED:
        flash("Deletion cancelled.", "secondary")
    else:
        flash(result.message, "danger")
