from models import db
from datetime import datetime, time

TIME_FORMATS = ('%H:%M', '%H:%M:%S')

def parse_time(value):
    """Convierte 'HH:MM' o 'HH:MM:SS' en datetime.time."""
    if isinstance(value, time):
        return value
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f'Hora no válida: {value!r}')

class Appointment(db.Model):
    __tablename__ = 'appointments'
    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey('sales.id', ondelete='SET NULL'), nullable=True)
    service_date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.String(8), nullable=False)  # HH:MM
    end_time = db.Column(db.String(8), nullable=False)    # HH:MM
    description = db.Column(db.String(255), nullable=True)
    attended = db.Column(db.Boolean, nullable=True)

    def starts_at(self):
        return datetime.combine(self.service_date, parse_time(self.start_time))

    def ends_at(self):
        return datetime.combine(self.service_date, parse_time(self.end_time))

    def to_dict(self):
        return {
            'id': self.id,
            'sale_id': self.sale_id,
            'service_date': self.service_date.strftime('%Y-%m-%d'),
            'start_time': self.start_time,
            'end_time': self.end_time,
            'description': self.description,
            'attended': self.attended
        }
