"""
Routes package for the field service backend
Organized in a tiered structure mirroring the model organization
"""

from flask import Blueprint
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.routes")

# Create main blueprint
main = Blueprint('main', __name__)

# Import route modules
from . import main_routes  # noqa: E402,F401


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .errors import register_error_handlers
    from .assets.equipment import bp as equipment_bp
    from .inventory.parts import bp as parts_bp
    from .maintenance.orders import bp as orders_bp
    from .maintenance.technician import bp as technician_bp

    app.register_blueprint(main)
    app.register_blueprint(equipment_bp, url_prefix='/equipamentos')
    app.register_blueprint(parts_bp, url_prefix='/correias')
    app.register_blueprint(orders_bp, url_prefix='/ordens')
    app.register_blueprint(technician_bp, url_prefix='/funcionario')

    register_error_handlers(app)

    logger.info("Route blueprints registered")
