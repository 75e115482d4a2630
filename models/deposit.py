from models import db
from datetime import datetime

# abono: pago parcial registrado contra una venta
class Deposit(db.Model):
    __tablename__ = 'deposits'
    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey('sales.id'), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow)
    payment_type_id = db.Column(db.Integer, db.ForeignKey('payment_types.id'), nullable=True)

    payment_type = db.relationship('PaymentType')
