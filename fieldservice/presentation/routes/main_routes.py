"""
Main routes - health and dashboard summary
"""
from flask import jsonify
from flask_login import login_required, current_user
from flask_wtf.csrf import generate_csrf

from fieldservice.presentation.routes import main
from fieldservice.services.core.dashboard_service import DashboardService
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.routes.main")


@main.route('/')
@login_required
def index():
    """Dashboard summary for the logged-in user"""
    logger.debug(f"Dashboard accessed by {current_user.username}")
    return jsonify({
        'success': True,
        'user': current_user.to_dict(),
        'summary': DashboardService.get_summary(),
    })


@main.route('/csrf-token')
def csrf_token():
    """Token for clients that post with CSRF protection enabled"""
    return jsonify({'csrf_token': generate_csrf()})
