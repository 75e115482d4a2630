from flask_wtf import FlaskForm
from wtforms import StringField, FloatField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange

class PaymentTypeForm(FlaskForm):
    name = StringField('Tipo de pago', validators=[DataRequired()])
    # InputRequired: 0 es un porcentaje válido
    percentage = FloatField('Porcentaje', validators=[InputRequired(), NumberRange(min=0, max=100)])
    submit = SubmitField('Guardar')
