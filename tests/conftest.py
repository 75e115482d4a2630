import pytest

from app import create_app
from config import TestConfig
from models import db
from models.user import User
from models.client import Client
from models.service import Service
from models.payment_type import PaymentType

ADMIN_EMAIL = 'admin@salon.cl'
WORKER_EMAIL = 'worker@salon.cl'
PASSWORD = 'secret123'


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seed(app):
    """Usuarios, cliente, servicios y tipos de pago básicos; devuelve sus ids."""
    admin = User(email=ADMIN_EMAIL, name='Admin', role='admin')
    admin.set_password(PASSWORD)
    worker = User(email=WORKER_EMAIL, name='Trabajadora', role='worker')
    worker.set_password(PASSWORD)
    client = Client(name='Ana Pérez', phone='+56911111111', national_id='11111111-1')
    facial = Service(name='Limpieza facial', session_count=1)
    laser = Service(name='Depilación láser', session_count=6)
    retired = Service(name='Servicio antiguo', session_count=1, status='inactive')
    cash = PaymentType(name='Efectivo', percentage=0)
    card = PaymentType(name='Crédito', percentage=10)
    db.session.add_all([admin, worker, client, facial, laser, retired, cash, card])
    db.session.commit()
    return {
        'admin': admin.id,
        'worker': worker.id,
        'client': client.id,
        'national_id': client.national_id,
        'facial': facial.id,
        'laser': laser.id,
        'retired': retired.id,
        'cash': cash.id,
        'card': card.id,
    }


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email):
    return client.post('/auth/login', data={'email': email, 'password': PASSWORD})


@pytest.fixture
def admin_client(client, seed):
    login(client, ADMIN_EMAIL)
    return client


@pytest.fixture
def worker_client(client, seed):
    login(client, WORKER_EMAIL)
    return client
