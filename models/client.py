from models import db
from datetime import datetime

class Client(db.Model):
    __tablename__ = 'clients'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    national_id = db.Column(db.String(32), unique=True, nullable=False)  # RUT
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
