from fieldservice import db
from fieldservice.utils.clock import utc_now
from fieldservice.buisness.core.data_insertion_mixin import DataInsertionMixin


class ConsumptionRecord(DataInsertionMixin, db.Model):
    """
    Append-only history of part consumption.

    Conventions:
    - Rows are written only by InventoryLedger.debit, in the same transaction
      as the stock decrement.
    - ``equipment_id`` and ``part_id`` are plain integers: history survives
      deletion of the equipment it refers to.
    """
    __tablename__ = 'consumo_correias'

    id = db.Column(db.Integer, primary_key=True)
    equipment_id = db.Column('equipamento_id', db.Integer, nullable=True, index=True)
    part_id = db.Column('correia_id', db.Integer, nullable=False, index=True)
    quantity = db.Column('quantidade', db.Integer, nullable=False)
    consumed_at = db.Column('data', db.DateTime, nullable=False, default=utc_now, index=True)

    def __repr__(self):
        return f'<ConsumptionRecord Equipment:{self.equipment_id} Part:{self.part_id} Qty:{self.quantity}>'
