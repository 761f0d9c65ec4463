"""
Part (belt) routes - registry, restock and monthly consumption report
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required

from fieldservice import db
from fieldservice.auth import admin_required, request_data
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.inventory.inventory_ledger import InventoryLedger
from fieldservice.buisness.inventory.part_manager import PartManager
from fieldservice.data.inventory.part import Part
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.routes.inventory.parts")

bp = Blueprint('parts', __name__)

# Request field -> Part attribute
FORM_FIELDS = {
    'nome': 'name',
    'modelo': 'model',
    'medida': 'size',
}


def _part_fields(data):
    return {attr: data[field] for field, attr in FORM_FIELDS.items() if field in data}


def _blank_to_none(value):
    return None if value is None or value == '' else value


@bp.route('', methods=['GET'])
@login_required
def part_list():
    parts = db.session.query(Part).order_by(Part.name).all()
    return jsonify({'success': True, 'parts': [p.to_dict() for p in parts]})


@bp.route('', methods=['POST'])
@login_required
@admin_required
def part_create():
    data = request_data()
    fields = _part_fields(data)
    if 'quantidade' in data:
        fields['quantity_on_hand'] = data['quantidade']
    part = PartManager().create(fields, RequestContext.from_current_user())
    return jsonify({'success': True, 'part': part.to_dict()}), 201


@bp.route('/relatorio', methods=['GET'])
@login_required
def consumption_report():
    """Monthly consumption per equipment and part (?mes=YYYY-MM)"""
    year_month = request.args.get('mes', '')
    rows = InventoryLedger().monthly_consumption_report(year_month)
    return jsonify({
        'success': True,
        'month': year_month,
        'rows': rows,
        'total_quantity': sum(row['total_quantity'] for row in rows),
    })


@bp.route('/<int:part_id>', methods=['GET'])
@login_required
def part_detail(part_id):
    part = PartManager.get(part_id)
    return jsonify({'success': True, 'part': part.to_dict()})


@bp.route('/<int:part_id>', methods=['PUT', 'POST'])
@login_required
@admin_required
def part_update(part_id):
    """Edit name/model/size. Stock changes go through /reabastecer."""
    part = PartManager().update(part_id, _part_fields(request_data()), RequestContext.from_current_user())
    return jsonify({'success': True, 'part': part.to_dict()})


@bp.route('/<int:part_id>/reabastecer', methods=['POST'])
@login_required
@admin_required
def part_restock(part_id):
    """
    Administrative stock adjustment.

    Body: {"quantidade": N} sets the stock, {"delta": N} adds to it.
    """
    data = request_data()
    part = InventoryLedger().restock(
        part_id,
        new_quantity=_blank_to_none(data.get('quantidade')),
        delta=_blank_to_none(data.get('delta')),
        context=RequestContext.from_current_user(),
    )
    return jsonify({'success': True, 'part': part.to_dict()})
