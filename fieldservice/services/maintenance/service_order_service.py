"""
Service Order Service
Presentation service for service order listings and detail views.
"""

from typing import Dict, List, Optional, Any

from sqlalchemy import case, func

from fieldservice import db
from fieldservice.buisness.errors import OrderNotFoundError, ValidationError
from fieldservice.buisness.maintenance.order_status import OrderStatus
from fieldservice.data.assets.equipment import Equipment, UNKNOWN_EQUIPMENT_NAME
from fieldservice.data.maintenance.service_order import ServiceOrder


class ServiceOrderService:
    """
    Read-only access to service orders joined with equipment display fields.
    """

    @staticmethod
    def _base_query():
        return (
            db.session.query(
                ServiceOrder,
                func.coalesce(Equipment.name, UNKNOWN_EQUIPMENT_NAME).label('equipment_name'),
                Equipment.code.label('equipment_code'),
                Equipment.location.label('equipment_location'),
            )
            .outerjoin(Equipment, Equipment.id == ServiceOrder.equipment_id)
        )

    @staticmethod
    def _serialize(row) -> Dict[str, Any]:
        order, equipment_name, equipment_code, equipment_location = row
        data = order.to_dict()
        data['equipment_name'] = equipment_name
        data['equipment_code'] = equipment_code
        data['equipment_location'] = equipment_location
        return data

    @staticmethod
    def list_orders(status: Optional[str] = None, equipment_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Orders for list views: open orders first, newest first within each group.

        Args:
            status: 'open' or 'closed' to filter, None for all
            equipment_id: Restrict to one equipment
        """
        query = ServiceOrderService._base_query()

        if status:
            try:
                query = query.filter(ServiceOrder.status == OrderStatus(status))
            except ValueError:
                raise ValidationError(f"Unknown order status: {status}")
        if equipment_id is not None:
            query = query.filter(ServiceOrder.equipment_id == equipment_id)

        open_first = case((ServiceOrder.status == OrderStatus.OPEN, 0), else_=1)
        query = query.order_by(open_first, ServiceOrder.opened_at.desc(), ServiceOrder.id.desc())

        return [ServiceOrderService._serialize(row) for row in query.all()]

    @staticmethod
    def get_order(order_id: int) -> Dict[str, Any]:
        row = ServiceOrderService._base_query().filter(ServiceOrder.id == order_id).first()
        if row is None:
            raise OrderNotFoundError(order_id)
        return ServiceOrderService._serialize(row)
