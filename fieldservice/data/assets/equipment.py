from fieldservice import db
from fieldservice.utils.clock import utc_now
from fieldservice.buisness.core.data_insertion_mixin import DataInsertionMixin

# Display name used wherever an order or consumption row points at equipment
# that no longer exists (or never did)
UNKNOWN_EQUIPMENT_NAME = 'unknown'


class Equipment(DataInsertionMixin, db.Model):
    """
    Registered piece of equipment.

    Orders and consumption records reference equipment by id only, without a
    foreign key, so deleting equipment never touches their history.
    """
    __tablename__ = 'equipamentos'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column('nome', db.String(200), nullable=False)
    code = db.Column('codigo', db.String(100), nullable=True)
    location = db.Column('local', db.String(200), nullable=True)
    description = db.Column('descricao', db.Text, nullable=True)
    # Opaque reference to a stored photo (path or URL)
    image = db.Column('imagem', db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=utc_now)

    part_links = db.relationship(
        'PartEquipmentLink',
        back_populates='equipment',
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<Equipment {self.id}: {self.name}>'
