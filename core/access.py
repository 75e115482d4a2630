from functools import wraps
from flask import jsonify
from flask_login import current_user

ADMIN = frozenset({'admin'})
STAFF = frozenset({'admin', 'worker'})

# capacidad -> roles que pueden usarla
PERMISSIONS = {
    'view_dashboard': STAFF,
    'register_clients': STAFF,
    'edit_clients': STAFF,
    'delete_clients': ADMIN,
    'export_clients': ADMIN,
    'view_services': STAFF,
    'manage_services': ADMIN,
    'manage_payment_types': ADMIN,
    'register_sales': STAFF,
    'view_sales': STAFF,
    'edit_sales': ADMIN,
    'delete_sales': ADMIN,
    'add_deposits': STAFF,
    'schedule_appointments': STAFF,
    'manage_commissions': ADMIN,
    'view_reports': ADMIN,
    'manage_users': ADMIN,
}

def can(user, capability):
    if user is None or not user.is_authenticated:
        return False
    return user.role in PERMISSIONS.get(capability, frozenset())

def permission_required(capability):
    # se usa debajo de @login_required
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not can(current_user, capability):
                return jsonify({'success': False, 'message': 'No autorizado'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator
