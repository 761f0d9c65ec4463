"""
Field technician routes - order intake from an equipment QR code

The QR label on each machine points at /funcionario/abrir_os?equip_id=<id>.
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from fieldservice import db
from fieldservice.auth import request_data
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.maintenance.order_lifecycle_manager import OrderLifecycleManager
from fieldservice.data.assets.equipment import Equipment, UNKNOWN_EQUIPMENT_NAME
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.routes.maintenance.technician")

bp = Blueprint('technician', __name__)


@bp.route('/abrir_os', methods=['GET'])
@login_required
def open_order_form():
    """Prefill data for the intake form of the scanned equipment"""
    equipment_id = request.args.get('equip_id', type=int)
    equipment = db.session.get(Equipment, equipment_id) if equipment_id is not None else None

    logger.info(f"QR intake for equipment {equipment_id} by {current_user.username}")
    return jsonify({
        'success': True,
        'equip_id': equipment_id,
        'equipment_name': equipment.name if equipment else UNKNOWN_EQUIPMENT_NAME,
        'equipment_location': equipment.location if equipment else None,
        'solicitante': current_user.username,
    })


@bp.route('/abrir_os', methods=['POST'])
@login_required
def open_order():
    data = request_data()
    order = OrderLifecycleManager().open(
        data.get('equip_id'),
        data.get('solicitante') or current_user.username,
        data.get('tipo'),
        data.get('descricao'),
        context=RequestContext.from_current_user(),
        photo_before=data.get('foto_antes'),
    )
    return jsonify({
        'success': True,
        'message': 'Service order opened',
        'order': order.to_dict(),
    }), 201
