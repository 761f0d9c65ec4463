"""
Flask CLI commands

    flask --app fieldservice build-db [--demo-data]
    flask --app fieldservice consumption-report 2024-05
"""

import click

from fieldservice.utils.logger import get_logger

logger = get_logger("fieldservice.cli")


def register_commands(app):

    @app.cli.command('build-db')
    @click.option('--demo-data', is_flag=True, help='Insert demo equipment and parts')
    def build_db_command(demo_data):
        """Create tables and the administrator account"""
        from fieldservice.build import build_database

        build_database(demo_data=demo_data)
        click.echo("Database ready")

    @app.cli.command('consumption-report')
    @click.argument('year_month')
    @click.option('--format', 'tablefmt', default='simple', help='tabulate table format')
    def consumption_report_command(year_month, tablefmt):
        """Print the monthly belt consumption (YYYY-MM)"""
        from fieldservice.buisness.errors import ValidationError
        from fieldservice.buisness.inventory.inventory_ledger import InventoryLedger
        from fieldservice.utils.report_printer import format_consumption_report

        try:
            rows = InventoryLedger().monthly_consumption_report(year_month)
        except ValidationError as e:
            raise click.BadParameter(e.message, param_hint='YEAR_MONTH')
        click.echo(format_consumption_report(year_month, rows, tablefmt=tablefmt))
