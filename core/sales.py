import logging
from collections import namedtuple
from models import db
from models.client import Client
from models.service import Service
from models.payment_type import PaymentType
from models.sale import Sale, SaleDetail
from models.deposit import Deposit
from models.commission import Commission
from core.commission import commission_for, DEFAULT_RATE
from core.errors import ValidationError, PersistenceError
from core import persistence

logger = logging.getLogger(__name__)

SaleLine = namedtuple('SaleLine', ['service_id', 'session_count', 'price'])


class SaleResult:
    """Lo que quedó escrito al registrar una venta.

    `errors` junta los pasos que fallaron después de guardar la venta; esas
    filas faltan pero la venta no se revierte.
    """

    def __init__(self, sale):
        self.sale = sale
        self.details = []
        self.deposit = None
        self.commission = None
        self.errors = []

    @property
    def complete(self):
        return not self.errors


def _resolve_payment_type(payment_type_id):
    if payment_type_id in (None, ''):
        return None
    payment_type = db.session.get(PaymentType, int(payment_type_id))
    if payment_type is None:
        raise ValidationError('PaymentTypeNotFound', 'Tipo de pago no encontrado.')
    return payment_type


def find_client(national_id):
    national_id = (national_id or '').strip()
    client = Client.query.filter_by(national_id=national_id).first() if national_id else None
    if client is None:
        raise ValidationError(
            'ClientNotRegistered',
            'El RUT ingresado no está registrado. Por favor, registre al cliente.'
        )
    return client


def record_sale(worker_id, national_id, lines, payment_type_id=None, deposit=0,
                description=None, rate=DEFAULT_RATE):
    """Registra la venta con sus detalles, el abono inicial y la comisión.

    Cada escritura es independiente: si falla la venta no se guarda nada; si
    falla un paso posterior se anota en el resultado y se sigue.
    """
    client = find_client(national_id)
    if not lines:
        raise ValidationError('NoSaleLines', 'Debe agregar al menos un servicio.')
    lines = [line if isinstance(line, SaleLine) else SaleLine(*line) for line in lines]
    for line in lines:
        if line.service_id in (None, '') or db.session.get(Service, int(line.service_id)) is None:
            raise ValidationError('ServiceNotFound', f'Servicio no encontrado (ID: {line.service_id}).')
    payment_type = _resolve_payment_type(payment_type_id)

    total = sum(float(line.price or 0) for line in lines)
    deposit = float(deposit or 0)
    if deposit < 0:
        raise ValidationError('InvalidAmount', 'El abono no puede ser negativo.')
    if deposit > total:
        raise ValidationError(
            'DepositExceedsBalance',
            f'El abono no puede exceder el total de la venta ({total:.0f}).'
        )
    commission_amount = commission_for(deposit, payment_type, rate)

    sale = Sale(
        client_id=client.id,
        worker_id=worker_id,
        total_price=total,
        description=description,
        payment_type_id=payment_type.id if payment_type else None,
        primary_service_id=int(lines[0].service_id)
    )
    persistence.save(sale)
    result = SaleResult(sale)

    details = [
        SaleDetail(
            sale_id=sale.id,
            service_id=int(line.service_id),
            session_count=int(line.session_count or 0),
            price=float(line.price or 0)
        )
        for line in lines
    ]
    try:
        persistence.save(*details)
        result.details = details
    except PersistenceError as e:
        result.errors.append(f'Detalles de venta: {e.message}')

    if deposit > 0:
        try:
            result.deposit = persistence.save(Deposit(
                sale_id=sale.id,
                amount=deposit,
                payment_type_id=sale.payment_type_id
            ))
        except PersistenceError as e:
            result.errors.append(f'Abono: {e.message}')

    try:
        result.commission = persistence.save(Commission(
            sale_id=sale.id,
            employee_id=worker_id,
            amount=commission_amount
        ))
    except PersistenceError as e:
        result.errors.append(f'Comisión: {e.message}')

    if result.errors:
        logger.error(f"Sale {sale.id} saved with missing rows: {result.errors}")
    else:
        logger.info(f"Sale {sale.id} registered: total={total} deposit={deposit} commission={commission_amount}")
    return result


def add_deposit(sale, amount, payment_type_id=None, rate=DEFAULT_RATE):
    """Abono posterior a la venta, con su comisión para el trabajador de la venta."""
    amount = float(amount or 0)
    if amount <= 0:
        raise ValidationError('InvalidAmount', 'El monto del abono debe ser mayor que cero.')
    if amount > sale.remaining:
        raise ValidationError(
            'DepositExceedsBalance',
            f'El pago no puede exceder el monto restante de {sale.remaining:.0f}.'
        )
    payment_type = _resolve_payment_type(payment_type_id) if payment_type_id else sale.payment_type
    if payment_type is None:
        raise ValidationError('PaymentTypeNotFound', 'Tipo de pago no encontrado.')

    deposit = persistence.save(Deposit(sale_id=sale.id, amount=amount, payment_type_id=payment_type.id))
    commission = persistence.save(Commission(
        sale_id=sale.id,
        employee_id=sale.worker_id,
        amount=commission_for(amount, payment_type, rate)
    ))
    return deposit, commission


def update_sale(sale, total_price=None, description=None, payment_type_id=None):
    # se valida todo antes de modificar la venta
    if total_price is not None:
        total_price = float(total_price)
        if total_price < 0:
            raise ValidationError('InvalidAmount', 'El precio no puede ser negativo.')
    payment_type = None
    if payment_type_id not in (None, ''):
        payment_type = _resolve_payment_type(payment_type_id)

    if total_price is not None:
        sale.total_price = total_price
    if description is not None:
        sale.description = description
    if payment_type_id == '':
        # vacío: la venta queda sin tipo de pago
        sale.payment_type_id = None
    elif payment_type is not None:
        sale.payment_type_id = payment_type.id
    persistence.commit()
    return sale


def update_session_count(sale, session_count):
    session_count = int(session_count)
    if session_count < 1:
        raise ValidationError('InvalidAmount', 'El total de sesiones debe ser al menos 1.')
    for detail in sale.details:
        detail.session_count = session_count
    persistence.commit()
    return sale


def delete_sale(sale):
    """Borra las citas de la venta y luego la venta, en dos pasos separados."""
    sale_id = sale.id
    if sale.appointments:
        persistence.remove(*sale.appointments)
    persistence.remove(sale)
    logger.info(f"Sale {sale_id} deleted")
