"""
Consumption Report Service
Read-only queries over the part consumption history.
"""

import re
from datetime import datetime
from typing import Dict, List, Any, Tuple

from sqlalchemy import func

from fieldservice import db
from fieldservice.buisness.errors import ValidationError
from fieldservice.data.assets.equipment import Equipment, UNKNOWN_EQUIPMENT_NAME
from fieldservice.data.inventory.consumption_record import ConsumptionRecord
from fieldservice.data.inventory.part import Part

YEAR_MONTH_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')
UNKNOWN_PART_NAME = 'unknown'
DEFAULT_HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 1000


class ConsumptionReportService:
    """
    Service for consumption history presentation data.

    Provides methods for:
    - Monthly totals per equipment and part
    - Consumption history of one equipment
    """

    @staticmethod
    def month_bounds(year_month: str) -> Tuple[datetime, datetime]:
        """
        Parse ``YYYY-MM`` into the half-open interval [first day, first day of next month).

        Raises:
            ValidationError: malformed month
        """
        match = YEAR_MONTH_PATTERN.match((year_month or '').strip())
        if not match:
            raise ValidationError("Month must use the YYYY-MM format")

        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 01 and 12")

        start = datetime(year, month, 1)
        end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
        return start, end

    @staticmethod
    def monthly_consumption(year_month: str) -> List[Dict[str, Any]]:
        """
        Total consumption per (equipment, part) within a month.

        Records of deleted equipment are kept and labelled ``unknown``.

        Returns:
            List of dicts ordered by equipment name then part name
        """
        start, end = ConsumptionReportService.month_bounds(year_month)

        equipment_name = func.coalesce(Equipment.name, UNKNOWN_EQUIPMENT_NAME)
        part_name = func.coalesce(Part.name, UNKNOWN_PART_NAME)

        rows = (
            db.session.query(
                ConsumptionRecord.equipment_id,
                equipment_name.label('equipment_name'),
                ConsumptionRecord.part_id,
                part_name.label('part_name'),
                func.sum(ConsumptionRecord.quantity).label('total_quantity'),
            )
            .outerjoin(Equipment, Equipment.id == ConsumptionRecord.equipment_id)
            .outerjoin(Part, Part.id == ConsumptionRecord.part_id)
            .filter(ConsumptionRecord.consumed_at >= start)
            .filter(ConsumptionRecord.consumed_at < end)
            .group_by(
                ConsumptionRecord.equipment_id,
                equipment_name,
                ConsumptionRecord.part_id,
                part_name,
            )
            .order_by(equipment_name, part_name)
            .all()
        )

        return [
            {
                'equipment_id': row.equipment_id,
                'equipment_name': row.equipment_name,
                'part_id': row.part_id,
                'part_name': row.part_name,
                'total_quantity': int(row.total_quantity or 0),
            }
            for row in rows
        ]

    @staticmethod
    def equipment_history(equipment_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Dict[str, Any]]:
        """
        Consumption records of one equipment, newest first.

        Args:
            limit: Most recent records returned, between 1 and MAX_HISTORY_LIMIT

        Raises:
            ValidationError: limit out of range
        """
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(f"limite must be between 1 and {MAX_HISTORY_LIMIT}")

        rows = (
            db.session.query(ConsumptionRecord, Part.name)
            .outerjoin(Part, Part.id == ConsumptionRecord.part_id)
            .filter(ConsumptionRecord.equipment_id == equipment_id)
            .order_by(ConsumptionRecord.consumed_at.desc(), ConsumptionRecord.id.desc())
            .limit(limit)
            .all()
        )

        history = []
        for record, name in rows:
            item = record.to_dict()
            item['part_name'] = name or UNKNOWN_PART_NAME
            history.append(item)
        return history
