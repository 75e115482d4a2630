from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from models import db

ROLES = ('admin', 'worker')

# usuarios del salón: administradores y trabajadores
class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(128), nullable=True)
    role = db.Column(db.String(20), nullable=False, default='worker')  # admin, worker
    commission_percent = db.Column(db.Float, nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def is_admin(self):
        return self.role == 'admin'

    def is_worker(self):
        return self.role == 'worker'

    def display_name(self):
        return self.name or self.email
