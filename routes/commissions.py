from flask import Blueprint, jsonify
from flask_login import login_required
from core.access import permission_required
from core.errors import SalonError
from core.reporting import per_employee_commissions, UNASSIGNED
from core import persistence
from models import db
from models.commission import Commission
from models.user import User

commissions_bp = Blueprint('commissions', __name__, url_prefix='/commissions')

def commission_to_dict(commission):
    sale = commission.sale
    payment_type = sale.payment_type if sale else None
    return {
        'id': commission.id,
        'sale_id': commission.sale_id,
        'employee_id': commission.employee_id,
        'employee_name': commission.employee.display_name() if commission.employee else None,
        'amount': commission.amount,
        'date': commission.date.strftime('%Y-%m-%d %H:%M') if commission.date else None,
        'sale_total': sale.total_price if sale else None,
        'payment_type': payment_type.name if payment_type else None,
        'payment_type_percentage': payment_type.percentage if payment_type else None,
        'deposits': [{
            'id': d.id,
            'amount': d.amount,
            'date': d.date.strftime('%Y-%m-%d %H:%M') if d.date else None
        } for d in sale.deposits] if sale else []
    }

@commissions_bp.route('/api/commissions')
@login_required
@permission_required('manage_commissions')
def api_list_commissions():
    commissions = Commission.query.order_by(Commission.date.desc()).all()
    return jsonify([commission_to_dict(c) for c in commissions])

@commissions_bp.route('/api/commissions/totals')
@login_required
@permission_required('manage_commissions')
def api_commission_totals():
    names = {u.id: u.display_name() for u in User.query.all()}
    totals = per_employee_commissions(Commission.query.all())
    return jsonify([{
        'employee_id': None if employee_id == UNASSIGNED else employee_id,
        'employee_name': names.get(employee_id, 'Sin asignar'),
        'total': total
    } for employee_id, total in totals])

@commissions_bp.route('/api/commissions/<int:commission_id>/delete', methods=['POST'])
@login_required
@permission_required('manage_commissions')
def api_delete_commission(commission_id):
    commission = db.get_or_404(Commission, commission_id)
    try:
        persistence.remove(commission)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True})
