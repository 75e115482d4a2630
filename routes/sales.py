from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from datetime import datetime
from core.access import permission_required
from core.errors import SalonError
from core.sales import SaleLine, record_sale, add_deposit, update_sale, update_session_count, delete_sale
from models import db
from models.sale import Sale
from models.client import Client
from models.service import Service

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')

def sale_to_dict(sale, now=None):
    upcoming = sale.future_appointments(now)
    return {
        'id': sale.id,
        'client_id': sale.client_id,
        'client_name': sale.client.name if sale.client else 'Cliente desconocido',
        'national_id': sale.client.national_id if sale.client else None,
        'worker_id': sale.worker_id,
        'worker_name': sale.worker.display_name() if sale.worker else 'Trabajador desconocido',
        'service_name': sale.primary_service.name if sale.primary_service else 'Servicio desconocido',
        'total_price': sale.total_price,
        'total_paid': sale.total_paid,
        'remaining': sale.remaining,
        'description': sale.description,
        'payment_type_id': sale.payment_type_id,
        'payment_type': sale.payment_type.name if sale.payment_type else None,
        'transaction_date': sale.transaction_date.strftime('%Y-%m-%d %H:%M') if sale.transaction_date else None,
        'session_count': sale.session_count(),
        'appointment_count': len(sale.appointments),
        'is_active': bool(upcoming),
        'next_appointment': upcoming[0].starts_at().strftime('%Y-%m-%d %H:%M') if upcoming else None,
        'details': [{
            'service_id': d.service_id,
            'service_name': d.service.name if d.service else None,
            'session_count': d.session_count,
            'price': d.price
        } for d in sale.details]
    }

def _parse_lines(items):
    lines = []
    for item in items:
        try:
            lines.append(SaleLine(
                service_id=int(item.get('service_id')),
                session_count=int(item.get('session_count') or 0),
                price=float(item.get('price') or 0)
            ))
        except (TypeError, ValueError):
            return None
    return lines

@sales_bp.route('/api/sales', methods=['POST'])
@login_required
@permission_required('register_sales')
def api_register_sale():
    data = request.json or {}
    items = data.get('details', [])
    if not items:
        return jsonify({'success': False, 'message': 'Debe agregar al menos un servicio'}), 400
    lines = _parse_lines(items)
    if lines is None:
        return jsonify({'success': False, 'message': 'Detalle de venta inválido'}), 400
    try:
        result = record_sale(
            worker_id=current_user.id,
            national_id=data.get('national_id', ''),
            lines=lines,
            payment_type_id=data.get('payment_type_id'),
            deposit=float(data.get('deposit') or 0),
            description=(data.get('description') or '').strip() or None,
            rate=current_app.config.get('COMMISSION_RATE', 0.10)
        )
    except (TypeError, ValueError):
        return jsonify({'success': False, 'message': 'Monto de abono inválido'}), 400
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    message = 'Venta registrada con éxito. Ahora, agende la cita.'
    if not result.complete:
        message = 'Venta registrada, pero algunos datos no se guardaron.'
    return jsonify({
        'success': True,
        'message': message,
        'complete': result.complete,
        'errors': result.errors,
        'sale': sale_to_dict(result.sale),
        'deposit': result.deposit.amount if result.deposit else 0,
        'commission': result.commission.amount if result.commission else None
    }), 201

@sales_bp.route('/api/sales')
@login_required
@permission_required('view_sales')
def api_list_sales():
    q = request.args.get('q', '').strip()
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config.get('ITEMS_PER_PAGE', 10), type=int)
    sales = Sale.query.join(Client, Sale.client_id == Client.id).outerjoin(
        Service, Sale.primary_service_id == Service.id
    )
    if q:
        sales = sales.filter(
            (Client.name.contains(q)) | (Client.national_id.contains(q)) | (Service.name.contains(q))
        )
    pagination = sales.order_by(Sale.transaction_date.desc()).paginate(page=page, per_page=per_page, error_out=False)
    now = datetime.now()
    return jsonify({
        'sales': [sale_to_dict(s, now) for s in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total
    })

@sales_bp.route('/api/sales/<int:sale_id>')
@login_required
@permission_required('view_sales')
def api_sale_detail(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    return jsonify(sale_to_dict(sale))

@sales_bp.route('/api/sales/<int:sale_id>', methods=['POST'])
@login_required
@permission_required('edit_sales')
def api_update_sale(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    data = request.json or {}
    try:
        update_sale(
            sale,
            total_price=data.get('total_price'),
            description=data.get('description'),
            payment_type_id=data.get('payment_type_id')
        )
    except (TypeError, ValueError):
        return jsonify({'success': False, 'message': 'Precio inválido'}), 400
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'sale': sale_to_dict(sale)})

@sales_bp.route('/api/sales/<int:sale_id>/delete', methods=['POST'])
@login_required
@permission_required('delete_sales')
def api_delete_sale(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    try:
        delete_sale(sale)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'message': 'Venta eliminada con éxito.'})

@sales_bp.route('/api/sales/<int:sale_id>/deposits', methods=['POST'])
@login_required
@permission_required('add_deposits')
def api_add_deposit(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    data = request.json or {}
    try:
        deposit, commission = add_deposit(
            sale,
            amount=float(data.get('amount') or 0),
            payment_type_id=data.get('payment_type_id'),
            rate=current_app.config.get('COMMISSION_RATE', 0.10)
        )
    except (TypeError, ValueError):
        return jsonify({'success': False, 'message': 'Monto inválido'}), 400
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({
        'success': True,
        'message': 'Pago y comisión agregados con éxito.',
        'deposit': deposit.amount,
        'commission': commission.amount,
        'remaining': sale.remaining
    }), 201

@sales_bp.route('/api/sales/<int:sale_id>/sessions', methods=['POST'])
@login_required
@permission_required('schedule_appointments')
def api_update_sessions(sale_id):
    sale = db.get_or_404(Sale, sale_id)
    data = request.json or {}
    try:
        update_session_count(sale, data.get('session_count'))
    except (TypeError, ValueError):
        return jsonify({'success': False, 'message': 'Total de sesiones inválido'}), 400
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'session_count': sale.session_count()})
