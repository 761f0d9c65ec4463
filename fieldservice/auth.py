from functools import wraps

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from fieldservice import db, login_manager
from fieldservice.data.core.user_info.user import User
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.auth")
auth = Blueprint('auth', __name__)


def request_data():
    """Request body as a dict, accepting JSON or form posts"""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


@login_manager.unauthorized_handler
def unauthorized():
    logger.warning(f"Unauthenticated access to {request.path}")
    return jsonify({'success': False, 'error': 'Authentication required'}), 401


def admin_required(view):
    """Restrict a view to administrators; use below @login_required"""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not current_user.is_admin:
            logger.warning(f"User {current_user.username} denied admin access to {request.path}")
            return jsonify({'success': False, 'error': 'Administrator access required'}), 403
        return view(*args, **kwargs)
    return wrapped


@auth.route('/login', methods=['POST'])
def login():
    if current_user.is_authenticated:
        return jsonify({'success': True, 'user': current_user.to_dict()})

    data = request_data()
    username = data.get('username')
    password = data.get('password')

    logger.debug(f"Login attempt for username: {username}")

    if not username or not password:
        logger.warning(f"Login attempt with missing credentials for username: {username}")
        return jsonify({'success': False, 'error': 'Please enter both username and password'}), 400

    user = db.session.query(User).filter_by(username=username).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'success': False, 'error': 'Invalid username or password'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {username}")
        return jsonify({'success': False, 'error': 'Account is disabled'}), 403

    login_user(user)
    logger.info(f"Successful login for user: {username}")
    return jsonify({'success': True, 'user': user.to_dict()})


@auth.route('/logout')
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    return jsonify({'success': True})
