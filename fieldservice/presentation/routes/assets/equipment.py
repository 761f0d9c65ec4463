"""
Equipment routes - registry, part links, consumption and stock debit
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from fieldservice.auth import admin_required, request_data
from fieldservice.buisness.assets.equipment_manager import EquipmentManager
from fieldservice.buisness.core.input_parsing import required_id
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.errors import ValidationError
from fieldservice.buisness.inventory.inventory_ledger import InventoryLedger
from fieldservice.buisness.inventory.part_link_manager import PartLinkManager
from fieldservice.data.assets.equipment import Equipment
from fieldservice.data.inventory.part import Part
from fieldservice import db
from fieldservice.services.inventory.consumption_report_service import (
    ConsumptionReportService,
    DEFAULT_HISTORY_LIMIT,
)
from fieldservice.utils.logger import get_logger
from fieldservice.utils.logging_sanitizer import sanitize_payload

logger = get_logger("fieldservice.routes.assets.equipment")

bp = Blueprint('equipment', __name__)

# Request field -> Equipment attribute
FORM_FIELDS = {
    'nome': 'name',
    'codigo': 'code',
    'local': 'location',
    'descricao': 'description',
    'imagem': 'image',
}


def _equipment_fields(data):
    return {attr: data[field] for field, attr in FORM_FIELDS.items() if field in data}


def _link_dict(link):
    return {
        'part_id': link.part_id,
        'part_name': link.part.name if link.part else None,
        'default_quantity': link.default_quantity,
    }


def _selected_links():
    """
    {part_id: default quantity} from the request.

    JSON: {"correias": [{"correia_id": 1, "quantidade_usada": 2}, ...]}
    Form: repeated ``correia_id`` fields with ``quantidade_usada`` fields in the
    same order (a missing quantity defaults to 1)
    """
    if not request.is_json:
        part_ids = request.form.getlist('correia_id')
        quantities = request.form.getlist('quantidade_usada')
        return {
            part_id: quantities[i] if i < len(quantities) else 1
            for i, part_id in enumerate(part_ids)
        }

    selected = request_data().get('correias', [])
    if not isinstance(selected, list):
        raise ValidationError("correias must be a list")

    selections = {}
    for item in selected:
        if not isinstance(item, dict) or 'correia_id' not in item:
            raise ValidationError("Each selected part needs a correia_id")
        selections[item['correia_id']] = item.get('quantidade_usada', 1)
    return selections


@bp.route('', methods=['GET'])
@login_required
def equipment_list():
    equipment = db.session.query(Equipment).order_by(Equipment.name).all()
    return jsonify({'success': True, 'equipment': [e.to_dict() for e in equipment]})


@bp.route('', methods=['POST'])
@login_required
@admin_required
def equipment_create():
    data = request_data()
    logger.debug(f"Equipment create request: {sanitize_payload(data)}")
    equipment = EquipmentManager().create(_equipment_fields(data), RequestContext.from_current_user())
    return jsonify({'success': True, 'equipment': equipment.to_dict()}), 201


@bp.route('/<int:equipment_id>', methods=['GET'])
@login_required
def equipment_detail(equipment_id):
    equipment = EquipmentManager.get(equipment_id)
    data = equipment.to_dict()
    data['part_links'] = [_link_dict(link) for link in PartLinkManager.list_links(equipment_id)]
    return jsonify({'success': True, 'equipment': data})


@bp.route('/<int:equipment_id>', methods=['PUT', 'POST'])
@login_required
@admin_required
def equipment_update(equipment_id):
    data = request_data()
    equipment = EquipmentManager().update(
        equipment_id, _equipment_fields(data), RequestContext.from_current_user()
    )
    return jsonify({'success': True, 'equipment': equipment.to_dict()})


@bp.route('/<int:equipment_id>', methods=['DELETE'])
@login_required
@admin_required
def equipment_delete(equipment_id):
    EquipmentManager().delete(equipment_id, RequestContext.from_current_user())
    return jsonify({'success': True})


@bp.route('/<int:equipment_id>/correias', methods=['GET'])
@login_required
def part_links(equipment_id):
    EquipmentManager.get(equipment_id)
    links = PartLinkManager.list_links(equipment_id)
    return jsonify({'success': True, 'links': [_link_dict(link) for link in links]})


@bp.route('/<int:equipment_id>/correias', methods=['PUT', 'POST'])
@login_required
@admin_required
def part_links_replace(equipment_id):
    """Replace all part links of an equipment; an empty selection clears them"""
    links = PartLinkManager().replace_links(equipment_id, _selected_links(), RequestContext.from_current_user())
    return jsonify({'success': True, 'links': [_link_dict(link) for link in links]})


@bp.route('/<int:equipment_id>/consumo', methods=['GET'])
@login_required
def consumption_history(equipment_id):
    """Newest consumption records first (?limite=N, default 100, at most 1000)"""
    limit = required_id(request.args.get('limite', DEFAULT_HISTORY_LIMIT), 'limite')
    return jsonify({
        'success': True,
        'history': ConsumptionReportService.equipment_history(equipment_id, limit=limit),
    })


@bp.route('/<int:equipment_id>/baixar-correia', methods=['POST'])
@login_required
def debit_part(equipment_id):
    """Consume belt stock for this equipment"""
    data = request_data()
    EquipmentManager.get(equipment_id)

    record = InventoryLedger().debit(
        equipment_id,
        data.get('correia_id'),
        data.get('quantidade'),
        context=RequestContext.from_current_user(),
    )
    part = db.session.get(Part, record.part_id)

    logger.info(
        f"Part {record.part_id} debited for equipment {equipment_id} by {current_user.username}"
    )
    return jsonify({
        'success': True,
        'consumption': record.to_dict(),
        'quantity_on_hand': part.quantity_on_hand,
    }), 201
