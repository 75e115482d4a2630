from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, SubmitField
from wtforms.validators import DataRequired, NumberRange

class ServiceForm(FlaskForm):
    name = StringField('Nombre del servicio', validators=[DataRequired()])
    session_count = IntegerField('Sesiones', validators=[DataRequired(), NumberRange(min=1)])
    submit = SubmitField('Guardar')
