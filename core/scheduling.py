import logging
from datetime import datetime, date
from models import db
from models.appointment import Appointment, parse_time
from models.sale import Sale
from core.errors import ValidationError, ConflictError
from core import persistence

logger = logging.getLogger(__name__)

def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), '%Y-%m-%d').date()
    except (AttributeError, ValueError):
        raise ValidationError('InvalidTimeWindow', f'Fecha no válida: {value!r}')

def time_window(service_date, start_time, end_time):
    """Devuelve (inicio, fin) como datetime combinando fecha y horas."""
    day = parse_date(service_date)
    try:
        start = datetime.combine(day, parse_time(start_time))
        end = datetime.combine(day, parse_time(end_time))
    except (AttributeError, ValueError):
        raise ValidationError('InvalidTimeWindow', 'Hora de inicio o término no válida.')
    if end < start:
        raise ValidationError('InvalidTimeWindow', 'La hora de término es anterior a la de inicio.')
    return start, end

def overlaps(a_start, a_end, b_start, b_end):
    # intervalos semiabiertos [inicio, fin)
    return b_start < a_end and a_start < b_end

def find_conflict(start, end, appointments, exclude_id=None):
    """Primera cita de `appointments` que se cruza con [start, end), o None.

    La cita `exclude_id` (la que se está editando) nunca cuenta.
    """
    for appointment in appointments:
        if exclude_id is not None and appointment.id == exclude_id:
            continue
        if overlaps(start, end, appointment.starts_at(), appointment.ends_at()):
            return appointment
    return None

def _check_available(start, end, existing, exclude_id=None):
    if existing is None:
        existing = Appointment.query.filter(Appointment.service_date == start.date()).all()
    conflict = find_conflict(start, end, existing, exclude_id=exclude_id)
    if conflict is not None:
        logger.warning(
            f"Appointment window {start:%Y-%m-%d %H:%M}-{end:%H:%M} overlaps appointment {conflict.id}"
        )
        raise ConflictError(
            f'El horario se cruza con otra cita ({conflict.start_time} - {conflict.end_time}).',
            appointment=conflict
        )

def schedule_appointment(sale_id, service_date, start_time, end_time, description=None, existing=None):
    """Agenda una cita nueva para una venta.

    `existing` son las citas ya cargadas contra las que se revisa el cruce; si
    no se entregan se consultan las del mismo día.
    """
    if sale_id is not None and db.session.get(Sale, int(sale_id)) is None:
        raise ValidationError('SaleNotFound', 'La venta indicada no existe.')
    start, end = time_window(service_date, start_time, end_time)
    _check_available(start, end, existing)
    appointment = Appointment(
        sale_id=sale_id,
        service_date=start.date(),
        start_time=start.strftime('%H:%M'),
        end_time=end.strftime('%H:%M'),
        description=description
    )
    persistence.save(appointment)
    logger.info(f"Appointment {appointment.id} scheduled for sale {sale_id}")
    return appointment

def update_appointment(appointment, service_date, start_time, end_time, description=None, existing=None):
    start, end = time_window(service_date, start_time, end_time)
    # se revisa antes de escribir: si hay cruce no se modifica nada
    _check_available(start, end, existing, exclude_id=appointment.id)
    appointment.service_date = start.date()
    appointment.start_time = start.strftime('%H:%M')
    appointment.end_time = end.strftime('%H:%M')
    if description is not None:
        appointment.description = description
    persistence.commit()
    return appointment

def delete_appointment(appointment):
    # la venta asociada no se toca; ver core.sales.delete_sale
    appointment_id = appointment.id
    persistence.remove(appointment)
    logger.info(f"Appointment {appointment_id} deleted")

def mark_attendance(appointment, attended):
    appointment.attended = attended
    persistence.commit()
    return appointment
