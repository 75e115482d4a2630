from flask import Flask, render_template
from flask_login import LoginManager, login_required, current_user
from config import Config
from flask_babel import Babel
import logging
from models import db
from core.notifications import mail
from models.user import User
from models.client import Client
from models.sale import Sale
from models.appointment import Appointment
from datetime import date

# Initialize extensions
login_manager = LoginManager()
babel = Babel()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    db.init_app(app)
    login_manager.init_app(app)
    mail.init_app(app)
    # página de inicio de sesión por defecto
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Inicie sesión para continuar.'
    def get_locale():
        return app.config.get('BABEL_DEFAULT_LOCALE', 'es')
    babel.init_app(app, locale_selector=get_locale)

    # Flask-Login user loader
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Register Blueprints
    from routes.auth import auth_bp
    app.register_blueprint(auth_bp)
    from routes.admin import admin_bp
    app.register_blueprint(admin_bp)
    from routes.clients import clients_bp
    app.register_blueprint(clients_bp)
    from routes.services import services_bp
    app.register_blueprint(services_bp)
    from routes.payment_types import payment_types_bp
    app.register_blueprint(payment_types_bp)
    from routes.sales import sales_bp
    app.register_blueprint(sales_bp)
    from routes.appointments import appointments_bp
    app.register_blueprint(appointments_bp)
    from routes.commissions import commissions_bp
    app.register_blueprint(commissions_bp)
    from routes.reports import reports_bp
    app.register_blueprint(reports_bp)

    # Dashboard route
    @app.route("/")
    @login_required
    def dashboard():
        today = date.today()
        clients_count = Client.query.count()
        sales_query = Sale.query
        if not current_user.is_admin():
            sales_query = sales_query.filter(Sale.worker_id == current_user.id)
        sales_count = sales_query.count()
        today_appointments = (
            Appointment.query
            .filter(Appointment.service_date == today)
            .order_by(Appointment.start_time)
            .all()
        )

        return render_template('dashboard.html',
                             clients_count=clients_count,
                             sales_count=sales_count,
                             today_appointments=today_appointments)

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
