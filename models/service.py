from models import db

class Service(db.Model):
    __tablename__ = 'services'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    session_count = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.String(16), nullable=False, default='active')  # active/inactive

    def is_active(self):
        return self.status == 'active'

    def toggle_status(self):
        self.status = 'inactive' if self.is_active() else 'active'
        return self.status
