"""
Service order routes - list, open, detail and close
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required

from fieldservice.auth import request_data
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.maintenance.order_lifecycle_manager import OrderLifecycleManager
from fieldservice.services.maintenance.service_order_service import ServiceOrderService
from fieldservice.utils.logger import get_logger
from fieldservice.utils.logging_sanitizer import sanitize_payload

logger = get_logger("fieldservice.routes.maintenance.orders")

bp = Blueprint('orders', __name__)


@bp.route('', methods=['GET'])
@login_required
def order_list():
    """Open orders first, newest first (?status=open|closed&equipamento_id=N)"""
    status = request.args.get('status', '').strip() or None
    equipment_id = request.args.get('equipamento_id', type=int)
    orders = ServiceOrderService.list_orders(status=status, equipment_id=equipment_id)
    return jsonify({'success': True, 'orders': orders})


@bp.route('', methods=['POST'])
@login_required
def order_open():
    data = request_data()
    logger.debug(f"Order open request: {sanitize_payload(data)}")
    order = OrderLifecycleManager().open(
        data.get('equipamento_id'),
        data.get('solicitante'),
        data.get('tipo'),
        data.get('descricao'),
        context=RequestContext.from_current_user(),
        photo_before=data.get('foto_antes'),
    )
    return jsonify({'success': True, 'order': ServiceOrderService.get_order(order.id)}), 201


@bp.route('/<int:order_id>', methods=['GET'])
@login_required
def order_detail(order_id):
    return jsonify({'success': True, 'order': ServiceOrderService.get_order(order_id)})


@bp.route('/<int:order_id>/fechar', methods=['POST'])
@login_required
def order_close(order_id):
    """
    Close an open order. Closing an already closed order answers 409 and keeps
    the stored result. Parts used are debited separately through
    /equipamentos/<id>/baixar-correia.
    """
    data = request_data()
    OrderLifecycleManager().close(
        order_id,
        data.get('resultado'),
        context=RequestContext.from_current_user(),
        photo_after=data.get('foto_depois'),
    )
    return jsonify({'success': True, 'order': ServiceOrderService.get_order(order_id)})
