"""
Dashboard Service
Counts shown on the landing page.
"""

from datetime import datetime
from typing import Dict, Optional

from fieldservice import db
from fieldservice.buisness.maintenance.order_status import OrderStatus
from fieldservice.data.inventory.part import Part
from fieldservice.data.maintenance.service_order import ServiceOrder
from fieldservice.utils.clock import utc_now


class DashboardService:

    @staticmethod
    def get_summary(now: Optional[datetime] = None) -> Dict[str, int]:
        now = now or utc_now()
        month_start = datetime(now.year, now.month, 1)

        return {
            'open_orders': db.session.query(ServiceOrder).filter(
                ServiceOrder.status == OrderStatus.OPEN
            ).count(),
            'closed_this_month': db.session.query(ServiceOrder).filter(
                ServiceOrder.status == OrderStatus.CLOSED,
                ServiceOrder.closed_at >= month_start,
            ).count(),
            'parts': db.session.query(Part).count(),
            'parts_out_of_stock': db.session.query(Part).filter(Part.quantity_on_hand <= 0).count(),
        }
