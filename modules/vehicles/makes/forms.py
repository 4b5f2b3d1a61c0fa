# modules/vehicles/makes/forms.py
from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional


class MakeForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired(message="Name is required"), Length(max=100)])
    abrv = StringField("Abbreviation", validators=[Optional(), Length(max=20)])
    submit = SubmitField("Save")
