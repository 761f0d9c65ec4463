"""
Part Manager
Administrative registry of consumable parts (belts).

Descriptor edits never touch stock; stock moves only through
InventoryLedger (debit or restock).
"""

from typing import Any, Dict, Optional

from fieldservice import db
from fieldservice.buisness.core.input_parsing import non_negative_quantity, optional_text, required_id, required_text
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import PartNotFoundError
from fieldservice.data.inventory.part import Part
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.inventory.parts")

DESCRIPTOR_FIELDS = ('name', 'model', 'size')


class PartManager:

    @staticmethod
    def get(part_id) -> Part:
        part_id = required_id(part_id, 'correia_id')
        part = db.session.get(Part, part_id)
        if part is None:
            raise PartNotFoundError(part_id)
        return part

    def create(self, data: Dict[str, Any], context: Optional[RequestContext] = None) -> Part:
        context = context or RequestContext.system()
        part = Part(
            name=required_text(data.get('name'), 'nome'),
            model=optional_text(data.get('model')),
            size=optional_text(data.get('size')),
            quantity_on_hand=non_negative_quantity(data.get('quantity_on_hand', 0), 'quantidade'),
        )
        with unit_of_work("create part") as session:
            session.add(part)
        logger.info(f"Part {part.id} ({part.name}) created with {part.quantity_on_hand} units by {context}")
        return part

    def update(self, part_id, data: Dict[str, Any], context: Optional[RequestContext] = None) -> Part:
        context = context or RequestContext.system()
        with unit_of_work(f"update part {part_id}"):
            part = self.get(part_id)
            for field in DESCRIPTOR_FIELDS:
                if field not in data:
                    continue
                if field == 'name':
                    part.name = required_text(data[field], 'nome')
                else:
                    setattr(part, field, optional_text(data[field]))
        logger.info(f"Part {part.id} updated by {context}")
        return part
