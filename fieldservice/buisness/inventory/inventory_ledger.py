from __future__ import annotations

from datetime import datetime
from typing import Callable

from sqlalchemy import select, update

from fieldservice import db
from fieldservice.buisness.core.input_parsing import non_negative_quantity, positive_quantity, required_id
from fieldservice.buisness.core.request_context import RequestContext
from fieldservice.buisness.core.unit_of_work import unit_of_work
from fieldservice.buisness.errors import InsufficientStockError, PartNotFoundError, ValidationError
from fieldservice.data.inventory.consumption_record import ConsumptionRecord
from fieldservice.data.inventory.part import Part
from fieldservice.utils.clock import utc_now
from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.buisness.inventory.ledger")


class InventoryLedger:
    """
    Stock levels for consumable parts plus the consumption history.

    Responsibilities:
    - Debit stock and append the matching ConsumptionRecord in one transaction
    - Administrative restock (no history row)
    - Monthly consumption report (read-only)

    Stock checks are never done in Python: every decrement is a conditional
    UPDATE guarded by ``quantidade >= :q``, so concurrent debits on the same
    part serialize in the database and stock cannot go negative.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def _available(self, part_id: int) -> int | None:
        return db.session.execute(
            select(Part.quantity_on_hand).where(Part.id == part_id)
        ).scalar_one_or_none()

    def debit(
        self,
        equipment_id: int | None,
        part_id: int,
        quantity: int,
        *,
        context: RequestContext | None = None,
    ) -> ConsumptionRecord:
        """
        Consume ``quantity`` units of a part against an equipment.

        Raises:
            InvalidQuantityError: quantity <= 0 or not an integer
            PartNotFoundError: part does not exist
            InsufficientStockError: quantity exceeds the stock on hand
            StorageError: the transaction could not be committed
        """
        quantity = positive_quantity(quantity, 'quantidade')
        part_id = required_id(part_id, 'correia_id')
        context = context or RequestContext.system()

        with unit_of_work(f"debit part {part_id}") as session:
            result = session.execute(
                update(Part)
                .where(Part.id == part_id, Part.quantity_on_hand >= quantity)
                .values(quantity_on_hand=Part.quantity_on_hand - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                available = self._available(part_id)
                if available is None:
                    raise PartNotFoundError(part_id)
                logger.warning(
                    f"Debit rejected for part {part_id}: requested {quantity}, "
                    f"available {available} (by {context})"
                )
                raise InsufficientStockError(part_id, quantity, available)

            record = ConsumptionRecord(
                equipment_id=equipment_id,
                part_id=part_id,
                quantity=quantity,
                consumed_at=self._clock(),
            )
            session.add(record)

        # The bulk UPDATE bypassed the identity map
        part = db.session.get(Part, part_id)
        if part is not None:
            db.session.refresh(part)

        logger.info(
            f"Debited {quantity} of part {part_id} for equipment {equipment_id} by {context}"
        )
        return record

    def restock(
        self,
        part_id: int,
        *,
        new_quantity: int | None = None,
        delta: int | None = None,
        context: RequestContext | None = None,
    ) -> Part:
        """
        Administrative stock adjustment. Writes no consumption history.

        Exactly one of ``new_quantity`` (absolute) or ``delta`` (relative) is
        required. The resulting stock must not be negative.
        """
        if (new_quantity is None) == (delta is None):
            raise ValidationError("Provide exactly one of new quantity or delta")
        part_id = required_id(part_id, 'correia_id')
        context = context or RequestContext.system()

        with unit_of_work(f"restock part {part_id}") as session:
            if new_quantity is not None:
                new_quantity = non_negative_quantity(new_quantity, 'quantidade')
                statement = (
                    update(Part)
                    .where(Part.id == part_id)
                    .values(quantity_on_hand=new_quantity)
                )
            else:
                delta = required_id(delta, 'delta')
                if delta == 0:
                    raise ValidationError("delta must not be zero")
                statement = (
                    update(Part)
                    .where(Part.id == part_id, Part.quantity_on_hand + delta >= 0)
                    .values(quantity_on_hand=Part.quantity_on_hand + delta)
                )

            result = session.execute(statement.execution_options(synchronize_session=False))
            if result.rowcount != 1:
                available = self._available(part_id)
                if available is None:
                    raise PartNotFoundError(part_id)
                raise InsufficientStockError(part_id, -delta, available)

        part = db.session.get(Part, part_id)
        db.session.refresh(part)
        logger.info(
            f"Restocked part {part_id} to {part.quantity_on_hand} "
            f"({'set' if new_quantity is not None else f'delta {delta}'}) by {context}"
        )
        return part

    def monthly_consumption_report(self, year_month: str) -> list[dict]:
        """SUM of consumption per (equipment, part) for ``YYYY-MM``"""
        from fieldservice.services.inventory.consumption_report_service import ConsumptionReportService

        return ConsumptionReportService.monthly_consumption(year_month)
