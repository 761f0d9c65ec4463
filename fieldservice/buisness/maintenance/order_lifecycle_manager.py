"""
Order Lifecycle Manager
Opens and closes service orders.

Closing an order and debiting stock are separate transactions: the caller
invokes InventoryLedger.debit on its own when parts were used. This module
never imports the ledger.
"""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import update

from fieldservice import db
from fieldservice.buisness.core.input_parsing import optional_id, optional_text, required_id, required_text
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import OrderNotFoundError
from fieldservice.buisness.maintenance.order_status import OrderStatus, transition
from fieldservice.data.maintenance.service_order import ServiceOrder
from fieldservice.utils.clock import utc_now
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.maintenance.order_lifecycle")


class OrderLifecycleManager:
    """
    Business logic for the service order state machine (open -> closed).

    Closing is idempotent-rejecting: a second close raises AlreadyClosedError
    and leaves the stored result and timestamp untouched.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def open(
        self,
        equipment_id: Optional[int],
        requester: str,
        order_type: Optional[str],
        description: str,
        context: Optional[RequestContext] = None,
        *,
        photo_before: Optional[str] = None,
    ) -> ServiceOrder:
        """
        Create a new open order.

        The equipment id is stored as given; it is not required to exist.

        Raises:
            ValidationError: missing requester or description
        """
        equipment_id = optional_id(equipment_id, 'equipamento_id')
        requester = required_text(requester, 'solicitante')
        description = required_text(description, 'descricao')
        context = context or RequestContext.system()

        order = ServiceOrder(
            equipment_id=equipment_id,
            requester=requester,
            order_type=optional_text(order_type),
            description=description,
            status=OrderStatus.OPEN,
            opened_at=self._clock(),
            closed_at=None,
            result=None,
            photo_before=optional_text(photo_before),
        )
        with unit_of_work("open service order") as session:
            session.add(order)

        logger.info(f"Service order {order.id} opened for equipment {equipment_id} by {context}")
        return order

    def close(
        self,
        order_id: int,
        result: str,
        context: Optional[RequestContext] = None,
        *,
        photo_after: Optional[str] = None,
    ) -> ServiceOrder:
        """
        Close an open order, storing the result and closing time together.

        Raises:
            ValidationError: missing result
            OrderNotFoundError: no such order
            AlreadyClosedError: order is already closed
        """
        order_id = required_id(order_id, 'order_id')
        result = required_text(result, 'resultado')
        context = context or RequestContext.system()

        with unit_of_work(f"close service order {order_id}") as session:
            order = session.get(ServiceOrder, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)

            target = transition(order.status, OrderStatus.CLOSED, order_id=order_id)

            # Guarded on status so a concurrent close of the same order cannot also succeed
            updated = session.execute(
                update(ServiceOrder)
                .where(ServiceOrder.id == order_id, ServiceOrder.status == OrderStatus.OPEN)
                .values(
                    status=target,
                    closed_at=self._clock(),
                    result=result,
                    photo_after=optional_text(photo_after),
                )
                .execution_options(synchronize_session=False)
            )
            if updated.rowcount != 1:
                session.expire(order)
                transition(order.status, OrderStatus.CLOSED, order_id=order_id)

        order = db.session.get(ServiceOrder, order_id)
        db.session.refresh(order)
        logger.info(f"Service order {order_id} closed by {context}")
        return order

    def get(self, order_id: int) -> ServiceOrder:
        order_id = required_id(order_id, 'order_id')
        order = db.session.get(ServiceOrder, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
