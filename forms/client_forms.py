from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional

class ClientForm(FlaskForm):
    name = StringField('Nombre', validators=[DataRequired(), Length(max=128)])
    phone = StringField('Teléfono', validators=[Optional(), Length(max=32)])
    national_id = StringField('RUT', validators=[DataRequired(), Length(max=32)])
    submit = SubmitField('Registrar cliente')
