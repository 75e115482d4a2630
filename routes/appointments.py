from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user
from core.access import permission_required, can
from core.errors import SalonError
from core.reporting import scheduled_date_counts
from core.sales import delete_sale
from core.scheduling import schedule_appointment, update_appointment, delete_appointment, mark_attendance
from models import db
from models.appointment import Appointment
from models.sale import Sale
from models.client import Client

appointments_bp = Blueprint('appointments', __name__, url_prefix='/appointments')

def event_to_dict(appointment):
    # formato de evento para la agenda
    event = appointment.to_dict()
    sale = appointment.sale
    event.update({
        'title': appointment.description or 'Sin título',
        'start': appointment.starts_at().strftime('%Y-%m-%dT%H:%M'),
        'end': appointment.ends_at().strftime('%Y-%m-%dT%H:%M'),
        'national_id': sale.client.national_id if sale and sale.client else 'No disponible'
    })
    return event

@appointments_bp.route('/api/appointments')
@login_required
@permission_required('schedule_appointments')
def api_list_appointments():
    q = request.args.get('q', '').strip()
    appointments = Appointment.query.outerjoin(Sale, Appointment.sale_id == Sale.id).outerjoin(
        Client, Sale.client_id == Client.id
    )
    if q:
        appointments = appointments.filter(
            (Appointment.description.contains(q)) | (Client.national_id.contains(q)) | (Client.name.contains(q))
        )
    appointments = appointments.order_by(Appointment.service_date, Appointment.start_time).all()
    return jsonify([event_to_dict(a) for a in appointments])

@appointments_bp.route('/api/scheduled-dates')
@login_required
@permission_required('schedule_appointments')
def api_scheduled_dates():
    appointments = Appointment.query.all()
    return jsonify(scheduled_date_counts(appointments))

@appointments_bp.route('/api/sales/<int:sale_id>/appointments')
@login_required
@permission_required('schedule_appointments')
def api_sale_appointments(sale_id):
    db.get_or_404(Sale, sale_id)
    appointments = (
        Appointment.query
        .filter_by(sale_id=sale_id)
        .order_by(Appointment.service_date, Appointment.start_time)
        .all()
    )
    return jsonify([a.to_dict() for a in appointments])

@appointments_bp.route('/api/sales/<int:sale_id>/appointments', methods=['POST'])
@login_required
@permission_required('schedule_appointments')
def api_schedule(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    data = request.json or {}
    try:
        appointment = schedule_appointment(
            sale.id,
            data.get('service_date'),
            data.get('start_time'),
            data.get('end_time'),
            description=data.get('description') or sale.description
        )
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({
        'success': True,
        'message': '¡La cita ha sido agendada con éxito!',
        'appointment': appointment.to_dict()
    }), 201

@appointments_bp.route('/api/appointments/<int:appointment_id>', methods=['POST'])
@login_required
@permission_required('schedule_appointments')
def api_update(appointment_id):
    appointment = db.get_or_404(Appointment, appointment_id)
    data = request.json or {}
    try:
        update_appointment(
            appointment,
            data.get('service_date', appointment.service_date),
            data.get('start_time', appointment.start_time),
            data.get('end_time', appointment.end_time),
            description=data.get('description')
        )
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'appointment': appointment.to_dict()})

@appointments_bp.route('/api/appointments/<int:appointment_id>/delete', methods=['POST'])
@login_required
@permission_required('schedule_appointments')
def api_delete(appointment_id):
    appointment = db.get_or_404(Appointment, appointment_id)
    data = request.get_json(silent=True) or {}
    sale = appointment.sale if data.get('delete_sale') else None
    if sale is not None and not can(current_user, 'delete_sales'):
        return jsonify({'success': False, 'message': 'No autorizado para eliminar la venta'}), 403
    try:
        delete_appointment(appointment)
        # segundo borrado independiente: si falla, la cita ya no existe
        if sale is not None:
            delete_sale(sale)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True})

@appointments_bp.route('/api/appointments/<int:appointment_id>/attendance', methods=['POST'])
@login_required
@permission_required('schedule_appointments')
def api_attendance(appointment_id):
    appointment = db.get_or_404(Appointment, appointment_id)
    data = request.json or {}
    attended = data.get('attended')
    if attended not in (True, False, None):
        return jsonify({'success': False, 'message': 'Valor de asistencia inválido'}), 400
    try:
        mark_attendance(appointment, attended)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'appointment': appointment.to_dict()})
