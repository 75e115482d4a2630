from app import create_app
from models import db
from models.user import User
from models.service import Service
from models.payment_type import PaymentType

def create_database():
    app = create_app()
    with app.app_context():
        # borrar todas las tablas existentes
        db.drop_all()
        print("Base de datos anterior eliminada")

        db.create_all()
        print("Base de datos nueva creada")

        # administrador por defecto
        admin_user = User(
            email='admin@salon.cl',
            name='Administrador',
            role='admin'
        )
        admin_user.set_password('admin123')
        db.session.add(admin_user)

        payment_types = [
            PaymentType(name='Efectivo', percentage=0),
            PaymentType(name='Transferencia', percentage=0),
            PaymentType(name='Débito', percentage=3),
            PaymentType(name='Crédito', percentage=5)
        ]
        for payment_type in payment_types:
            db.session.add(payment_type)

        services = [
            Service(name='Depilación láser', session_count=6),
            Service(name='Limpieza facial', session_count=1),
            Service(name='Masaje reductivo', session_count=10)
        ]
        for service in services:
            db.session.add(service)

        db.session.commit()
        print("Datos por defecto agregados")
        print("Datos de acceso:")
        print("Correo: admin@salon.cl")
        print("Contraseña: admin123")

if __name__ == '__main__':
    create_database()
