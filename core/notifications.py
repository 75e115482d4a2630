import logging
from flask import current_app
from flask_mail import Mail, Message

logger = logging.getLogger(__name__)

mail = Mail()

def send_password_reset(user, reset_url):
    minutes = current_app.config.get('PASSWORD_RESET_MAX_AGE', 3600) // 60
    body = f"""Hola {user.display_name()},

Se solicitó restablecer la contraseña de su cuenta en el sistema del salón.

Para elegir una contraseña nueva abra el siguiente enlace:
{reset_url}

El enlace vence en {minutes} minutos y sirve una sola vez.
Si usted no hizo esta solicitud, ignore este correo.
"""
    msg = Message('Restablecer contraseña', recipients=[user.email], body=body)
    mail.send(msg)
    logger.info(f"Password reset link sent to user {user.id}")
