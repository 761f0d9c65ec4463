"""
Part Link Manager
Maintains the advisory part <-> equipment associations.
"""

from typing import Dict, List, Mapping, Optional

from fieldservice import db
from fieldservice.buisness.core.input_parsing import positive_quantity, required_id
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import EquipmentNotFoundError, PartNotFoundError
from fieldservice.data.assets.equipment import Equipment
from fieldservice.data.inventory.part import Part
from fieldservice.data.inventory.part_equipment_link import PartEquipmentLink
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.inventory.part_links")


class PartLinkManager:
    """
    Saving the links of an equipment is a full replacement: every existing link
    is deleted and the selected ones inserted, in one transaction. Parts left
    out of the selection are unlinked.
    """

    def replace_links(
        self,
        equipment_id,
        selections: Mapping,
        context: Optional[RequestContext] = None,
    ) -> List[PartEquipmentLink]:
        """
        Args:
            equipment_id: Equipment whose links are replaced
            selections: {part_id: default quantity}; empty clears all links

        Raises:
            EquipmentNotFoundError, PartNotFoundError, InvalidQuantityError
        """
        context = context or RequestContext.system()
        equipment_id = required_id(equipment_id, 'equipamento_id')

        cleaned: Dict[int, int] = {}
        for raw_part_id, raw_quantity in selections.items():
            part_id = required_id(raw_part_id, 'correia_id')
            cleaned[part_id] = positive_quantity(raw_quantity, 'quantidade_usada')

        with unit_of_work(f"replace part links of equipment {equipment_id}") as session:
            if session.get(Equipment, equipment_id) is None:
                raise EquipmentNotFoundError(equipment_id)
            for part_id in cleaned:
                if session.get(Part, part_id) is None:
                    raise PartNotFoundError(part_id)

            session.query(PartEquipmentLink).filter(
                PartEquipmentLink.equipment_id == equipment_id
            ).delete(synchronize_session='fetch')

            links = [
                PartEquipmentLink(equipment_id=equipment_id, part_id=part_id, default_quantity=quantity)
                for part_id, quantity in cleaned.items()
            ]
            session.add_all(links)

        logger.info(
            f"Replaced part links of equipment {equipment_id} with {sorted(cleaned)} by {context}"
        )
        return self.list_links(equipment_id)

    @staticmethod
    def list_links(equipment_id) -> List[PartEquipmentLink]:
        equipment_id = required_id(equipment_id, 'equipamento_id')
        return (
            PartEquipmentLink.query
            .filter_by(equipment_id=equipment_id)
            .join(Part, Part.id == PartEquipmentLink.part_id)
            .order_by(Part.name)
            .all()
        )
