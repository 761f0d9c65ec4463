from fieldservice import db
from fieldservice.utils.clock import utc_now
from fieldservice.buisness.core.data_insertion_mixin import DataInsertionMixin
from fieldservice.buisness.maintenance.order_status import OrderStatus


class ServiceOrder(DataInsertionMixin, db.Model):
    """
    Service (work) order for a piece of equipment.

    ``closed_at`` and ``result`` stay NULL while the order is open and are
    written together with ``status`` by OrderLifecycleManager.close.
    """
    __tablename__ = 'ordens'

    id = db.Column(db.Integer, primary_key=True)
    # Not a foreign key: orders may point at equipment that was deleted or never existed
    equipment_id = db.Column('equipamento_id', db.Integer, nullable=True, index=True)
    requester = db.Column('solicitante', db.String(200), nullable=False)
    order_type = db.Column('tipo', db.String(100), nullable=True)
    description = db.Column('descricao', db.Text, nullable=False)
    status = db.Column(
        'status',
        db.Enum(
            OrderStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
            validate_strings=True,
        ),
        nullable=False,
        default=OrderStatus.OPEN,
        index=True,
    )
    opened_at = db.Column('aberta_em', db.DateTime, nullable=False, default=utc_now)
    closed_at = db.Column('fechada_em', db.DateTime, nullable=True)
    result = db.Column('resultado', db.Text, nullable=True)
    # Opaque references to stored photos (path or URL), taken when opening and closing
    photo_before = db.Column('foto_antes', db.String(500), nullable=True)
    photo_after = db.Column('foto_depois', db.String(500), nullable=True)

    def __repr__(self):
        return f'<ServiceOrder {self.id} {self.status}>'

    @property
    def is_open(self):
        return self.status == OrderStatus.OPEN
