from flask import Blueprint, request, jsonify, send_file
from flask_login import login_required
from datetime import datetime
import io
import pandas as pd
from core.access import permission_required
from core.errors import SalonError
from core import persistence
from forms.client_forms import ClientForm
from models import db
from models.client import Client

clients_bp = Blueprint('clients', __name__, url_prefix='/clients')

def client_to_dict(client):
    return {
        'id': client.id,
        'name': client.name,
        'phone': client.phone,
        'national_id': client.national_id,
        'created_at': client.created_at.strftime('%Y-%m-%d %H:%M') if client.created_at else None
    }

@clients_bp.route('/api/clients')
@login_required
@permission_required('register_clients')
def list_clients():
    q = request.args.get('q', '').strip()
    sort = request.args.get('sort', 'created_at')
    clients = Client.query
    if q:
        clients = clients.filter(
            (Client.name.contains(q)) | (Client.phone.contains(q)) | (Client.national_id.contains(q))
        )
    if sort == 'name':
        clients = clients.order_by(Client.name)
    elif sort == 'national_id':
        clients = clients.order_by(Client.national_id)
    else:
        clients = clients.order_by(Client.created_at.desc())
    return jsonify([client_to_dict(c) for c in clients.all()])

@clients_bp.route('/api/national_ids')
@login_required
@permission_required('register_sales')
def lookup_national_ids():
    # autocompletado del RUT en el formulario de venta
    prefix = request.args.get('prefix', '').strip()
    if not prefix:
        return jsonify([])
    clients = Client.query.filter(Client.national_id.startswith(prefix)).order_by(Client.national_id).limit(20)
    return jsonify([c.national_id for c in clients])

@clients_bp.route('/api/clients', methods=['POST'])
@login_required
@permission_required('register_clients')
def register_client():
    form = ClientForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    national_id = form.national_id.data.strip()
    if Client.query.filter_by(national_id=national_id).first():
        return jsonify({'success': False, 'message': 'El cliente ya está registrado con ese RUT'}), 400
    client = Client(name=form.name.data.strip(), phone=(form.phone.data or '').strip() or None,
                    national_id=national_id)
    try:
        persistence.save(client)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'client': client_to_dict(client)}), 201

@clients_bp.route('/api/clients/<int:client_id>', methods=['POST'])
@login_required
@permission_required('edit_clients')
def edit_client(client_id):
    client = db.get_or_404(Client, client_id)
    name = request.form.get('name', '').strip()
    phone = request.form.get('phone', '').strip()
    national_id = request.form.get('national_id', '').strip()
    if national_id and national_id != client.national_id:
        if Client.query.filter_by(national_id=national_id).first():
            return jsonify({'success': False, 'message': 'Ya existe un cliente con ese RUT'}), 400
        client.national_id = national_id
    if name:
        client.name = name
    if phone:
        client.phone = phone
    try:
        persistence.commit()
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'client': client_to_dict(client)})

@clients_bp.route('/api/clients/<int:client_id>/delete', methods=['POST'])
@login_required
@permission_required('delete_clients')
def delete_client(client_id):
    client = db.get_or_404(Client, client_id)
    if client.sales:
        return jsonify({'success': False, 'message': 'El cliente tiene ventas registradas'}), 400
    try:
        persistence.remove(client)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True})

@clients_bp.route('/export')
@login_required
@permission_required('export_clients')
def export_clients():
    clients = Client.query.order_by(Client.created_at.desc()).all()
    data = [{
        'Nombre': c.name,
        'RUT': c.national_id,
        'Teléfono': c.phone,
        'Fecha de registro': c.created_at.strftime('%Y-%m-%d %H:%M') if c.created_at else ''
    } for c in clients]
    df = pd.DataFrame(data, columns=['Nombre', 'RUT', 'Teléfono', 'Fecha de registro'])
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name='Clientes', index=False)
    output.seek(0)
    return send_file(
        output,
        as_attachment=True,
        download_name=f'clientes_{datetime.now():%Y%m%d_%H%M%S}.xlsx',
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
