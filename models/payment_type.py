from models import db

class PaymentType(db.Model):
    __tablename__ = 'payment_types'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    # porcentaje descontado del abono antes de calcular la comisión
    percentage = db.Column(db.Float, nullable=False, default=0)
