# modules/vehicles/resources.py
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from flask import current_app

SORT_DIRECTIONS = ("asc", "desc")
PAGE_SIZE_OPTIONS = (5, 10, 20, 50)


@dataclass(frozen=True)
class EntityResource:
    """Everything the list/form/mutation code needs to know about one table."""

    name: str
    config_table_key: str
    default_table: str
    select: str
    sort_fields: Dict[str, str]
    filter_fields: Dict[str, str]
    required_fields: Dict[str, str]
    editable_fields: Tuple[str, ...]
    storage_key: str
    cache_tags: Tuple[str, ...]
    invalidates: Tuple[str, ...]
    label_plural: str
    confirm_delete_message: str
    delete_error_message: str
    load_error_message: str
    not_found_message: str
    fk_field: Optional[str] = None
    join_key: Optional[str] = None
    save_error_message: str = "Error saving data."
    int_fields: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def table(self) -> str:
        try:
            return current_app.config.get(self.config_table_key) or self.default_table
        except RuntimeError:
            # outside an app context
            return self.default_table


MAKES = EntityResource(
    name="makes",
    config_table_key="MAKE_TABLE",
    default_table="VehicleMake",
    select="*",
    sort_fields={"name": "Name", "abrv": "Abbreviation", "id": "ID"},
    filter_fields={"name": "Name", "abrv": "Abbreviation"},
    required_fields={"name": "Name"},
    editable_fields=("name", "abrv"),
    storage_key="vehicleMakeListState",
    cache_tags=("VehicleMake",),
    # model rows embed the make name
    invalidates=("VehicleMake", "VehicleModel"),
    label_plural="Vehicle Manufacturers",
    confirm_delete_message="Are you sure you want to delete this manufacturer?",
    delete_error_message="Error deleting the manufacturer.",
    load_error_message="Error loading manufacturers.",
    not_found_message="Manufacturer not found",
)

MODELS = EntityResource(
    name="models",
    config_table_key="MODEL_TABLE",
    default_table="VehicleModel",
    select="id,name,abrv,make_id,VehicleMake(name)",
    sort_fields={"name": "Model Name", "abrv": "Abbreviation", "id": "ID", "make_id": "Manufacturer"},
    filter_fields={"name": "Model Name", "abrv": "Abbreviation", "make_id": "Manufacturer"},
    required_fields={"name": "Model Name", "make_id": "Manufacturer"},
    editable_fields=("name", "abrv", "make_id"),
    storage_key="vehicleModelListState",
    cache_tags=("VehicleModel",),
    invalidates=("VehicleModel",),
    label_plural="Vehicle Models",
    confirm_delete_message="Are you sure you want to delete this model?",
    delete_error_message="Error deleting model.",
    load_error_message="Error loading models.",
    not_found_message="Model not found",
    fk_field="make_id",
    join_key="VehicleMake",
    int_fields=("make_id",),
)
