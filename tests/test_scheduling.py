from datetime import date, datetime

import pytest

from core.errors import ConflictError, ValidationError
from core.scheduling import (
    overlaps, find_conflict, time_window, schedule_appointment, update_appointment,
    delete_appointment, mark_attendance,
)
from core.sales import record_sale, SaleLine
from models import db
from models.appointment import Appointment
from models.sale import Sale

DAY = date(2030, 6, 14)


def appointment(appointment_id, start, end, day=DAY, sale_id=None):
    return Appointment(id=appointment_id, sale_id=sale_id, service_date=day, start_time=start, end_time=end)


def window(start, end, day=DAY):
    return time_window(day, start, end)


def test_adjacent_windows_do_not_overlap():
    existing = [appointment(1, '09:00', '10:00')]
    assert find_conflict(*window('10:00', '11:00'), existing) is None


def test_partially_overlapping_windows_conflict():
    existing = [appointment(1, '09:00', '10:30')]
    assert find_conflict(*window('10:00', '11:00'), existing) is existing[0]


def test_overlap_is_symmetric():
    a = window('09:00', '10:30')
    b = window('10:00', '11:00')
    c = window('11:00', '12:00')
    assert overlaps(*a, *b) == overlaps(*b, *a) is True
    assert overlaps(*a, *c) == overlaps(*c, *a) is False


def test_same_times_on_different_dates_do_not_overlap():
    existing = [appointment(1, '09:00', '10:00', day=date(2030, 6, 15))]
    assert find_conflict(*window('09:00', '10:00'), existing) is None


def test_edited_appointment_is_excluded():
    existing = [appointment(1, '09:00', '10:00'), appointment(2, '12:00', '13:00')]
    assert find_conflict(*window('09:00', '10:00'), existing, exclude_id=1) is None
    assert find_conflict(*window('09:30', '12:30'), existing, exclude_id=1) is existing[1]


def test_zero_duration_window_at_a_boundary_is_accepted():
    existing = [appointment(1, '09:00', '10:00')]
    assert find_conflict(*window('10:00', '10:00'), existing) is None


def test_inverted_window_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        time_window(DAY, '11:00', '10:00')
    assert excinfo.value.reason == 'InvalidTimeWindow'


def test_time_window_accepts_seconds_and_strings():
    start, end = time_window('2030-06-14', '09:00:00', '09:45')
    assert start == datetime(2030, 6, 14, 9, 0)
    assert end == datetime(2030, 6, 14, 9, 45)


def test_bad_date_is_rejected():
    with pytest.raises(ValidationError):
        time_window('14/06/2030', '09:00', '10:00')


def _sale(seed, national_id=None):
    result = record_sale(
        seed['worker'], national_id or seed['national_id'],
        [SaleLine(seed['facial'], 1, 10000)], payment_type_id=seed['cash']
    )
    return result.sale.id


def test_schedule_rejects_same_window_for_another_sale(seed):
    first = _sale(seed)
    second = _sale(seed)
    schedule_appointment(first, DAY, '09:00', '10:00', 'Primera sesión')

    with pytest.raises(ConflictError):
        schedule_appointment(second, DAY, '09:00', '10:00', 'Otra venta')
    assert Appointment.query.count() == 1


def test_schedule_unknown_sale_is_rejected(seed):
    with pytest.raises(ValidationError):
        schedule_appointment(12345, DAY, '09:00', '10:00')


def test_update_same_window_of_same_appointment_is_accepted(seed):
    sale_id = _sale(seed)
    booked = schedule_appointment(sale_id, DAY, '09:00', '10:00')

    updated = update_appointment(booked, DAY, '09:00', '10:00', description='Misma hora')
    assert updated.description == 'Misma hora'


def test_update_into_another_window_does_not_write(seed):
    sale_id = _sale(seed)
    first = schedule_appointment(sale_id, DAY, '09:00', '10:00')
    second = schedule_appointment(sale_id, DAY, '11:00', '12:00')

    with pytest.raises(ConflictError):
        update_appointment(second, DAY, '09:30', '10:30')
    db.session.expire_all()
    stored = db.session.get(Appointment, second.id)
    assert (stored.start_time, stored.end_time) == ('11:00', '12:00')
    assert first.start_time == '09:00'


def test_existing_set_limits_the_check(seed):
    sale_id = _sale(seed)
    schedule_appointment(sale_id, DAY, '09:00', '10:00')
    # solo se revisan las citas entregadas
    schedule_appointment(sale_id, DAY, '09:00', '10:00', existing=[])
    assert Appointment.query.count() == 2


def test_delete_appointment_keeps_sale(seed):
    sale_id = _sale(seed)
    booked = schedule_appointment(sale_id, DAY, '09:00', '10:00')
    delete_appointment(booked)
    assert Appointment.query.count() == 0
    assert db.session.get(Sale, sale_id) is not None


def test_mark_attendance(seed):
    sale_id = _sale(seed)
    booked = schedule_appointment(sale_id, DAY, '09:00', '10:00')
    mark_attendance(booked, True)
    assert booked.attended is True
    mark_attendance(booked, None)
    assert booked.attended is None
