from flask import Blueprint, render_template, redirect, url_for, flash, request, session, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from datetime import datetime
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
import smtplib
import logging
from core.errors import SalonError
from core.notifications import send_password_reset
from core import persistence
from forms.auth_forms import LoginForm, ForgotPasswordForm, ResetPasswordForm
from models.user import User

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
logger = logging.getLogger(__name__)

def wants_json():
    return '/api/' in request.path or request.is_json

def _now():
    return datetime.utcnow().timestamp()

@auth_bp.before_app_request
def enforce_inactivity_timeout():
    # cierre de sesión por inactividad, independiente de ventas y citas
    if request.endpoint == 'static' or not current_user.is_authenticated:
        return None
    limit = current_app.config.get('INACTIVITY_TIMEOUT_MINUTES', 5) * 60
    last_activity = session.get('last_activity')
    now = _now()
    if last_activity is not None and now - last_activity > limit:
        logger.info(f"Session of user {current_user.id} expired after inactivity")
        logout_user()
        session.clear()
        if wants_json():
            return jsonify({'success': False, 'message': 'La sesión expiró por inactividad.'}), 401
        return redirect(url_for('auth.timeout'))
    session['last_activity'] = now
    return None

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()
        if user and user.check_password(form.password.data) and login_user(user):
            session['last_activity'] = _now()
            logger.info(f"User {user.id} signed in")
            flash('Sesión iniciada con éxito', 'success')
            return redirect(url_for('dashboard'))
        flash('Correo o contraseña incorrectos', 'danger')
    return render_template('auth/login.html', title='Iniciar sesión', form=form)

@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    session.clear()
    flash('Sesión cerrada con éxito', 'success')
    return redirect(url_for('auth.login'))

@auth_bp.route('/timeout')
def timeout():
    return render_template('auth/timeout.html', title='Sesión expirada')

@auth_bp.route('/api/session')
def current_session():
    if not current_user.is_authenticated:
        return jsonify({'success': False, 'message': 'Sin sesión activa'}), 401
    return jsonify({
        'success': True,
        'user': {
            'id': current_user.id,
            'email': current_user.email,
            'name': current_user.name,
            'role': current_user.role
        }
    })

def _reset_serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt='password-reset')

def make_reset_token(user):
    # el fragmento del hash invalida el enlace una vez cambiada la contraseña
    return _reset_serializer().dumps({'id': user.id, 'stamp': user.password_hash[-12:]})

def load_reset_user(token):
    max_age = current_app.config.get('PASSWORD_RESET_MAX_AGE', 3600)
    try:
        data = _reset_serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        logger.info("Expired password reset token")
        return None
    except BadSignature:
        logger.warning("Invalid password reset token")
        return None
    user = User.query.filter_by(id=data.get('id'), is_active=True).first()
    if user is None or user.password_hash[-12:] != data.get('stamp'):
        return None
    return user

@auth_bp.route('/forgot', methods=['GET', 'POST'])
def forgot_password():
    form = ForgotPasswordForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower(), is_active=True).first()
        if user:
            reset_url = url_for('auth.reset_password', token=make_reset_token(user), _external=True)
            try:
                send_password_reset(user, reset_url)
            except (smtplib.SMTPException, OSError):
                logger.exception(f"Could not send password reset mail to user {user.id}")
                flash('No se pudo enviar el correo. Intente más tarde.', 'danger')
                return render_template('auth/forgot.html', title='Recuperar contraseña', form=form)
        # mismo mensaje exista o no la cuenta
        flash('Si el correo está registrado, recibirá un enlace para restablecer la contraseña.', 'info')
        return redirect(url_for('auth.login'))
    return render_template('auth/forgot.html', title='Recuperar contraseña', form=form)

@auth_bp.route('/reset/<token>', methods=['GET', 'POST'])
def reset_password(token):
    user = load_reset_user(token)
    if user is None:
        flash('El enlace no es válido o ya venció.', 'danger')
        return redirect(url_for('auth.forgot_password'))
    form = ResetPasswordForm()
    if form.validate_on_submit():
        user.set_password(form.password.data)
        try:
            persistence.commit()
        except SalonError as e:
            flash(e.message, 'danger')
            return render_template('auth/reset.html', title='Nueva contraseña', form=form)
        logger.info(f"Password reset for user {user.id}")
        flash('Contraseña actualizada. Ya puede iniciar sesión.', 'success')
        return redirect(url_for('auth.login'))
    return render_template('auth/reset.html', title='Nueva contraseña', form=form)
