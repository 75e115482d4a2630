from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from core.access import permission_required
from core.errors import SalonError
from core import persistence
from forms.auth_forms import UserForm, UserUpdateForm
from models import db
from models.user import User

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

def user_to_dict(user):
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'role': user.role,
        'commission_percent': user.commission_percent,
        'is_active': user.is_active
    }

@admin_bp.route('/api/users')
@login_required
@permission_required('manage_users')
def list_users():
    users = User.query.order_by(User.name).all()
    return jsonify([user_to_dict(u) for u in users])

@admin_bp.route('/api/users', methods=['POST'])
@login_required
@permission_required('manage_users')
def create_user():
    form = UserForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    email = form.email.data.strip().lower()
    if User.query.filter_by(email=email).first():
        return jsonify({'success': False, 'message': 'El correo ya está registrado'}), 400
    user = User(email=email, name=form.name.data, role=form.role.data,
                commission_percent=form.commission_percent.data)
    user.set_password(form.password.data)
    try:
        persistence.save(user)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'user': user_to_dict(user)}), 201

@admin_bp.route('/api/users/<int:user_id>', methods=['POST'])
@login_required
@permission_required('manage_users')
def update_user(user_id):
    user = db.get_or_404(User, user_id)
    form = UserUpdateForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Datos inválidos', 'errors': form.errors}), 400
    if form.role.data and form.role.data != user.role:
        if user.id == current_user.id:
            return jsonify({'success': False, 'message': 'No puede cambiar su propio rol'}), 400
        user.role = form.role.data
    if form.name.data:
        user.name = form.name.data
    if form.commission_percent.data is not None:
        user.commission_percent = form.commission_percent.data
    try:
        persistence.commit()
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True, 'user': user_to_dict(user)})

@admin_bp.route('/api/users/<int:user_id>/delete', methods=['POST'])
@login_required
@permission_required('manage_users')
def delete_user(user_id):
    user = db.get_or_404(User, user_id)
    if user.id == current_user.id:
        return jsonify({'success': False, 'message': 'No puede eliminarse a sí mismo'}), 400
    try:
        persistence.remove(user)
    except SalonError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify({'success': True})
