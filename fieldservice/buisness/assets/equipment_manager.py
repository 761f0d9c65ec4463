"""
Equipment Manager
Administrative create/update/delete for registered equipment.
"""

from typing import Any, Dict, Optional

from fieldservice import db
from fieldservice.buisness.core.input_parsing import optional_text, required_id, required_text
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import EquipmentNotFoundError
from fieldservice.data.assets.equipment import Equipment
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.assets.equipment")

EDITABLE_FIELDS = ('name', 'code', 'location', 'description', 'image')


class EquipmentManager:

    @staticmethod
    def get(equipment_id) -> Equipment:
        equipment_id = required_id(equipment_id, 'equipamento_id')
        equipment = db.session.get(Equipment, equipment_id)
        if equipment is None:
            raise EquipmentNotFoundError(equipment_id)
        return equipment

    @staticmethod
    def _clean(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
        cleaned = {}
        for field in EDITABLE_FIELDS:
            if field not in data:
                continue
            if field == 'name':
                cleaned[field] = required_text(data[field], 'nome')
            else:
                cleaned[field] = optional_text(data[field])
        if not partial and 'name' not in cleaned:
            cleaned['name'] = required_text(None, 'nome')
        return cleaned

    def create(self, data: Dict[str, Any], context: Optional[RequestContext] = None) -> Equipment:
        context = context or RequestContext.system()
        equipment = Equipment.from_dict(self._clean(data, partial=False))
        with unit_of_work("create equipment") as session:
            session.add(equipment)
        logger.info(f"Equipment {equipment.id} ({equipment.name}) created by {context}")
        return equipment

    def update(self, equipment_id, data: Dict[str, Any], context: Optional[RequestContext] = None) -> Equipment:
        context = context or RequestContext.system()
        with unit_of_work(f"update equipment {equipment_id}"):
            equipment = self.get(equipment_id)
            for field, value in self._clean(data, partial=True).items():
                setattr(equipment, field, value)
        logger.info(f"Equipment {equipment.id} updated by {context}")
        return equipment

    def delete(self, equipment_id, context: Optional[RequestContext] = None) -> None:
        """
        Remove equipment and its advisory part links.

        Service orders and consumption history keep the dangling id.
        """
        context = context or RequestContext.system()
        with unit_of_work(f"delete equipment {equipment_id}") as session:
            equipment = self.get(equipment_id)
            session.delete(equipment)
        logger.info(f"Equipment {equipment_id} deleted by {context}")
