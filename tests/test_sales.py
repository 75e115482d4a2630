import pytest

from core import persistence
from core.errors import ValidationError, PersistenceError
from core.sales import SaleLine, record_sale, add_deposit, update_sale, update_session_count, delete_sale
from core.scheduling import schedule_appointment
from models import db
from models.sale import Sale, SaleDetail
from models.deposit import Deposit
from models.commission import Commission
from models.appointment import Appointment


def _lines(seed):
    return [SaleLine(seed['facial'], 1, 1000), SaleLine(seed['laser'], 6, 2000)]


def test_record_sale_with_two_lines_and_deposit(seed):
    result = record_sale(seed['worker'], seed['national_id'], _lines(seed),
                         payment_type_id=seed['card'], deposit=500, description='Pack verano')

    assert result.complete
    sale = result.sale
    assert sale.total_price == 3000
    assert sale.client_id == seed['client']
    assert sale.primary_service_id == seed['facial']
    assert len(sale.details) == 2
    assert result.deposit.amount == 500
    assert result.commission.amount == 45
    assert result.commission.employee_id == seed['worker']


def test_record_sale_without_deposit_creates_zero_commission(seed):
    result = record_sale(seed['worker'], seed['national_id'], _lines(seed), payment_type_id=seed['cash'])

    assert result.deposit is None
    assert Deposit.query.count() == 0
    assert result.commission.amount == 0
    assert Commission.query.count() == 1


def test_record_sale_without_payment_type_has_zero_commission(seed):
    result = record_sale(seed['worker'], seed['national_id'], _lines(seed), deposit=1000)
    assert result.commission.amount == 0
    assert result.deposit.amount == 1000


def test_deposit_above_total_is_rejected_without_writes(seed):
    with pytest.raises(ValidationError) as excinfo:
        record_sale(seed['worker'], seed['national_id'], [SaleLine(seed['facial'], 1, 1000)],
                    payment_type_id=seed['card'], deposit=5000)
    assert excinfo.value.reason == 'DepositExceedsBalance'
    with pytest.raises(ValidationError):
        record_sale(seed['worker'], seed['national_id'], [SaleLine(seed['facial'], 1, 0)], deposit=500)
    assert Sale.query.count() == 0
    assert Deposit.query.count() == 0
    assert Commission.query.count() == 0


def test_deposit_equal_to_total_is_recorded_as_entered(seed):
    result = record_sale(seed['worker'], seed['national_id'], [SaleLine(seed['facial'], 1, 1000)],
                         payment_type_id=seed['card'], deposit=1000)
    assert result.deposit.amount == 1000
    assert result.commission.amount == 90
    assert result.sale.remaining == 0


def test_clearing_payment_type_on_update(seed):
    sale = record_sale(seed['worker'], seed['national_id'], _lines(seed), payment_type_id=seed['card']).sale
    update_sale(sale, payment_type_id='')
    assert db.session.get(Sale, sale.id).payment_type_id is None


def test_unregistered_client_is_rejected(seed):
    with pytest.raises(ValidationError) as excinfo:
        record_sale(seed['worker'], '99999999-9', _lines(seed), payment_type_id=seed['cash'])
    assert excinfo.value.reason == 'ClientNotRegistered'
    assert Sale.query.count() == 0


def test_unknown_service_is_rejected(seed):
    with pytest.raises(ValidationError) as excinfo:
        record_sale(seed['worker'], seed['national_id'], [SaleLine(4242, 1, 1000)])
    assert excinfo.value.reason == 'ServiceNotFound'


def test_unknown_payment_type_is_rejected(seed):
    with pytest.raises(ValidationError) as excinfo:
        record_sale(seed['worker'], seed['national_id'], _lines(seed), payment_type_id=4242)
    assert excinfo.value.reason == 'PaymentTypeNotFound'


def test_sale_without_lines_is_rejected(seed):
    with pytest.raises(ValidationError):
        record_sale(seed['worker'], seed['national_id'], [])


def test_failed_commission_keeps_the_sale(seed, monkeypatch):
    original_save = persistence.save

    def failing_save(*records):
        if isinstance(records[0], Commission):
            raise PersistenceError('commission table unavailable')
        return original_save(*records)

    monkeypatch.setattr(persistence, 'save', failing_save)
    result = record_sale(seed['worker'], seed['national_id'], _lines(seed),
                         payment_type_id=seed['card'], deposit=500)

    assert not result.complete
    assert result.commission is None
    assert 'commission table unavailable' in result.errors[0]
    assert Sale.query.count() == 1
    assert SaleDetail.query.count() == 2
    assert Deposit.query.count() == 1
    assert Commission.query.count() == 0


def test_failed_sale_insert_is_fatal(seed, monkeypatch):
    def failing_save(*records):
        raise PersistenceError('backend down')

    monkeypatch.setattr(persistence, 'save', failing_save)
    with pytest.raises(PersistenceError):
        record_sale(seed['worker'], seed['national_id'], _lines(seed))


def test_add_deposit_creates_commission_for_sale_worker(seed):
    sale = record_sale(seed['worker'], seed['national_id'], _lines(seed),
                       payment_type_id=seed['card'], deposit=500).sale

    deposit, commission = add_deposit(sale, 1000)
    assert deposit.amount == 1000
    assert commission.amount == 90
    assert commission.employee_id == seed['worker']
    assert sale.total_paid == 1500
    assert sale.remaining == 1500


def test_add_deposit_cannot_exceed_balance(seed):
    sale = record_sale(seed['worker'], seed['national_id'], _lines(seed),
                       payment_type_id=seed['cash'], deposit=2500).sale

    with pytest.raises(ValidationError) as excinfo:
        add_deposit(sale, 600)
    assert excinfo.value.reason == 'DepositExceedsBalance'
    with pytest.raises(ValidationError):
        add_deposit(sale, 0)


def test_update_sale_and_sessions(seed):
    sale = record_sale(seed['worker'], seed['national_id'], _lines(seed), payment_type_id=seed['cash']).sale

    update_sale(sale, total_price=2500, description='Con descuento', payment_type_id=seed['card'])
    update_session_count(sale, 8)
    db.session.expire_all()
    sale = db.session.get(Sale, sale.id)
    assert sale.total_price == 2500
    assert sale.payment_type_id == seed['card']
    assert [d.session_count for d in sale.details] == [8, 8]
    with pytest.raises(ValidationError):
        update_session_count(sale, 0)


def test_delete_sale_removes_its_appointments(seed):
    sale = record_sale(seed['worker'], seed['national_id'], _lines(seed),
                       payment_type_id=seed['cash'], deposit=100).sale
    schedule_appointment(sale.id, '2030-01-10', '09:00', '10:00')
    schedule_appointment(sale.id, '2030-01-17', '09:00', '10:00')

    delete_sale(sale)
    assert Sale.query.count() == 0
    assert Appointment.query.count() == 0
    assert SaleDetail.query.count() == 0
    assert Deposit.query.count() == 0
    assert Commission.query.count() == 0
