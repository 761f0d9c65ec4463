from fieldservice import db
from fieldservice.buisness.core.data_insertion_mixin import DataInsertionMixin


class PartEquipmentLink(DataInsertionMixin, db.Model):
    """
    Advisory mapping of which parts an equipment usually consumes.

    ``default_quantity`` is the usual amount per replacement; it is never
    used to move stock.
    """
    __tablename__ = 'correias_equipamentos'

    equipment_id = db.Column('equipamento_id', db.Integer, db.ForeignKey('equipamentos.id'), primary_key=True)
    part_id = db.Column('correia_id', db.Integer, db.ForeignKey('correias.id'), primary_key=True)
    default_quantity = db.Column('quantidade_usada', db.Integer, nullable=False, default=1)

    equipment = db.relationship('Equipment', back_populates='part_links')
    part = db.relationship('Part', back_populates='equipment_links')

    def __repr__(self):
        return f'<PartEquipmentLink Equipment:{self.equipment_id} Part:{self.part_id} Qty:{self.default_quantity}>'
