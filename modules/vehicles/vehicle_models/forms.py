# modules/vehicles/vehicle_models/forms.py
from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional


def make_choices(makes):
    # 0 is the "nothing selected" option; DataRequired rejects it
    return [(0, "Select Manufacturer")] + [(m["id"], m["name"]) for m in makes]


class VehicleModelForm(FlaskForm):
    name = StringField("Model Name", validators=[DataRequired(message="Model Name is required"), Length(max=100)])
    abrv = StringField("Abbreviation", validators=[Optional(), Length(max=20)])
    make_id = SelectField(
        "Manufacturer",
        coerce=int,
        validators=[DataRequired(message="Manufacturer is required")],
    )
    submit = SubmitField("Save")

    def __init__(self, *args, makes=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.make_id.choices = make_choices(makes)
