from models import db
from datetime import datetime

class Sale(db.Model):
    __tablename__ = 'sales'
    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey('clients.id'), nullable=False)
    worker_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    total_price = db.Column(db.Float, nullable=False, default=0)
    description = db.Column(db.String(255), nullable=True)
    payment_type_id = db.Column(db.Integer, db.ForeignKey('payment_types.id'), nullable=True)
    transaction_date = db.Column(db.DateTime, default=datetime.utcnow)
    primary_service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=True)
    # relaciones
    client = db.relationship('Client', backref='sales')
    worker = db.relationship('User', backref='sales')
    payment_type = db.relationship('PaymentType')
    primary_service = db.relationship('Service')
    details = db.relationship('SaleDetail', backref='sale', cascade='all, delete-orphan')
    deposits = db.relationship('Deposit', backref='sale', cascade='all, delete-orphan')
    commissions = db.relationship('Commission', backref='sale', cascade='all, delete-orphan')
    # las citas se borran aparte, ver core.sales.delete_sale
    appointments = db.relationship('Appointment', backref='sale', passive_deletes=True)

    @property
    def total_paid(self):
        return sum(d.amount for d in self.deposits)

    @property
    def remaining(self):
        return self.total_price - self.total_paid

    def future_appointments(self, now=None):
        now = now or datetime.now()
        upcoming = [a for a in self.appointments if a.starts_at() > now]
        return sorted(upcoming, key=lambda a: a.starts_at())

    def session_count(self):
        return self.details[0].session_count if self.details else 1

class SaleDetail(db.Model):
    __tablename__ = 'sale_details'
    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey('sales.id'), nullable=False)
    service_id = db.Column(db.Integer, db.ForeignKey('services.id'), nullable=False)
    session_count = db.Column(db.Integer, nullable=False, default=1)
    price = db.Column(db.Float, nullable=False, default=0)
    # relaciones
    service = db.relationship('Service')
