from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .user import User
from .client import Client
from .service import Service
from .payment_type import PaymentType
from .sale import Sale, SaleDetail
from .deposit import Deposit
from .commission import Commission
from .appointment import Appointment
