from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, SelectField, FloatField
from wtforms.validators import DataRequired, Length, Email, Optional, NumberRange, EqualTo

ROLE_CHOICES = [('worker', 'Trabajador'), ('admin', 'Administrador')]

class LoginForm(FlaskForm):
    email = StringField('Correo', validators=[DataRequired(), Email()])
    password = PasswordField('Contraseña', validators=[DataRequired()])
    submit = SubmitField('Iniciar sesión')

class UserForm(FlaskForm):
    email = StringField('Correo', validators=[DataRequired(), Email()])
    name = StringField('Nombre', validators=[DataRequired(), Length(max=128)])
    password = PasswordField('Contraseña', validators=[DataRequired(), Length(min=6)])
    role = SelectField('Rol', choices=ROLE_CHOICES, validators=[DataRequired()])
    commission_percent = FloatField('Comisión (%)', validators=[Optional(), NumberRange(min=0, max=100)])
    submit = SubmitField('Crear usuario')

class UserUpdateForm(FlaskForm):
    name = StringField('Nombre', validators=[Optional(), Length(max=128)])
    role = SelectField('Rol', choices=ROLE_CHOICES, validators=[Optional()])
    commission_percent = FloatField('Comisión (%)', validators=[Optional(), NumberRange(min=0, max=100)])
    submit = SubmitField('Guardar')

class ForgotPasswordForm(FlaskForm):
    email = StringField('Correo', validators=[DataRequired(), Email()])
    submit = SubmitField('Enviar enlace')

class ResetPasswordForm(FlaskForm):
    password = PasswordField('Contraseña nueva', validators=[DataRequired(), Length(min=6)])
    confirm = PasswordField('Confirmar contraseña', validators=[DataRequired(), EqualTo('password', message='Las contraseñas no coinciden')])
    submit = SubmitField('Guardar contraseña')
