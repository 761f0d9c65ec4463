from fieldservice import db
from fieldservice.buisness.core.data_insertion_mixin import DataInsertionMixin

# this class holds a consumable part (a belt) and its stock on hand
# stock only goes down through InventoryLedger.debit, which also writes history


class Part(DataInsertionMixin, db.Model):
    __tablename__ = 'correias'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column('nome', db.String(200), nullable=False)
    model = db.Column('modelo', db.String(100), nullable=True)
    size = db.Column('medida', db.String(100), nullable=True)
    quantity_on_hand = db.Column('quantidade', db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.CheckConstraint('quantidade >= 0', name='ck_correias_quantidade_non_negative'),
    )

    equipment_links = db.relationship('PartEquipmentLink', back_populates='part', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Part {self.id}: {self.name} Qty:{self.quantity_on_hand}>'

    @property
    def is_out_of_stock(self):
        return (self.quantity_on_hand or 0) <= 0
