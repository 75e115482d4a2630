from flask import Blueprint, jsonify
from flask_login import login_required
from core.access import permission_required
from core.errors import SalonError
from core import persistence
from forms.payment_type_forms import PaymentTypeForm
from models import db
from models.payment_type import PaymentType
from models.sale import Sale

payment_types_bp = Blueprint('payment_types', __name__, url_prefix='/payment-types')

def payment_type_to_dict(payment_type):
    return {
        'id': payment_type.id,
        'name': payment_type.name,
        'percentage': payment_type.percentage
    }

@payment_types_bp.route('/api/payment-types')
@login_required
def list_payment_types():
    payment_types = PaymentType.query.order_by(PaymentType.name).all()
    return jsonify([payment_type_to_dict(p) for p in payment_types])

@payment_types_bp.route('/api/payment-types', methods=['POST'])
@login_required
@permission_required('manage_payment_types')
def create_payment_type():
    form = PaymentTypeForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    payment_type = PaymentType(name=form.name.data.strip(), percentage=form.percentage.data)
    try:
        persistence.save(payment_type)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'payment_type': payment_type_to_dict(payment_type)}), 201

@payment_types_bp.route('/api/payment-types/<int:payment_type_id>', methods=['POST'])
@login_required
@permission_required('manage_payment_types')
def edit_payment_type(payment_type_id):
    payment_type = db.get_or_404(PaymentType, payment_type_id)
    form = PaymentTypeForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    payment_type.name = form.name.data.strip()
    payment_type.percentage = form.percentage.data
    try:
        persistence.commit()
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'payment_type': payment_type_to_dict(payment_type)})

@payment_types_bp.route('/api/payment-types/<int:payment_type_id>/delete', methods=['POST'])
@login_required
@permission_required('manage_payment_types')
def delete_payment_type(payment_type_id):
    payment_type = db.get_or_404(PaymentType, payment_type_id)
    if Sale.query.filter_by(payment_type_id=payment_type.id).first():
        return jsonify({'success': False, 'message': 'El tipo de pago está en uso por ventas'}), 400
    try:
        persistence.remove(payment_type)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True})
