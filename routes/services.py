from flask import Blueprint, request, jsonify
from flask_login import login_required
from core.access import permission_required
from core.errors import SalonError
from core import persistence
from forms.service_forms import ServiceForm
from models import db
from models.service import Service

services_bp = Blueprint('services', __name__, url_prefix='/services')

def service_to_dict(service):
    return {
        'id': service.id,
        'name': service.name,
        'session_count': service.session_count,
        'status': service.status
    }

@services_bp.route('/api/services')
@login_required
@permission_required('view_services')
def list_services():
    services = Service.query
    # el formulario de venta solo ofrece servicios activos
    if request.args.get('active') == '1':
        services = services.filter(Service.status == 'active')
    return jsonify([service_to_dict(s) for s in services.order_by(Service.name).all()])

@services_bp.route('/api/services', methods=['POST'])
@login_required
@permission_required('manage_services')
def create_service():
    form = ServiceForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    service = Service(name=form.name.data.strip(), session_count=form.session_count.data, status='active')
    try:
        persistence.save(service)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'service': service_to_dict(service)}), 201

@services_bp.route('/api/services/<int:service_id>', methods=['POST'])
@login_required
@permission_required('manage_services')
def edit_service(service_id):
    service = db.get_or_404(Service, service_id)
    form = ServiceForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    service.name = form.name.data.strip()
    service.session_count = form.session_count.data
    try:
        persistence.commit()
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'service': service_to_dict(service)})

@services_bp.route('/api/services/<int:service_id>/toggle', methods=['POST'])
@login_required
@permission_required('manage_services')
def toggle_service(service_id):
    service = db.get_or_404(Service, service_id)
    service.toggle_status()
    try:
        persistence.commit()
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'service': service_to_dict(service)})
