"""
Plain-text rendering of report rows for the command line.
"""

from typing import Dict, List, Any

from tabulate import tabulate

CONSUMPTION_HEADERS = ['Equipment', 'Part', 'Quantity']


def format_consumption_report(year_month: str, rows: List[Dict[str, Any]], tablefmt: str = 'simple') -> str:
    """
    Render monthly consumption rows as a table with a total line.

    Args:
        year_month: Month shown in the title (YYYY-MM)
        rows: Output of ConsumptionReportService.monthly_consumption
        tablefmt: Any tabulate table format
    """
    if not rows:
        return f"Consumption {year_month}: no records"

    table = [[row['equipment_name'], row['part_name'], row['total_quantity']] for row in rows]
    total = sum(row['total_quantity'] for row in rows)
    table.append(['TOTAL', '', total])

    return f"Consumption {year_month}\n" + tabulate(table, headers=CONSUMPTION_HEADERS, tablefmt=tablefmt)
