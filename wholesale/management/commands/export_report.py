"""
Management command to export the monthly sales report as CSV.
"""
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from wholesale.domain.errors import OrderingError
from wholesale.infra.csv_export import render_report_csv, report_filename
from wholesale.services import ReportService


class Command(BaseCommand):
    help = 'Export the monthly sales report of one session as CSV'

    def add_arguments(self, parser):
        parser.add_argument(
            '--session',
            default=None,
            help='Session key (defaults to WHOLESALE_DEFAULT_SESSION)',
        )
        parser.add_argument(
            '--year',
            type=int,
            default=None,
            help='Report year (defaults to the current month)',
        )
        parser.add_argument(
            '--month',
            type=int,
            default=None,
            help='Report month 1-12 (defaults to the current month)',
        )
        parser.add_argument(
            '--output',
            default=None,
            help='Directory or file to write; "-" writes to stdout',
        )

    def handle(self, *args, **options):
        session_key = options['session'] or settings.WHOLESALE_DEFAULT_SESSION

        try:
            report = ReportService().monthly_report(
                session_key, year=options['year'], month=options['month']
            )
        except OrderingError as e:
            raise CommandError(e.message) from e

        content = render_report_csv(report)
        output = options['output']
        if output == '-':
            self.stdout.write(content, ending='')
            return

        target = Path(output) if output else Path.cwd()
        if target.is_dir():
            target = target / report_filename(report)
        target.write_text(content, encoding='utf-8')
        self.stdout.write(
            self.style.SUCCESS(f'Wrote {report.total_orders} orders to {target}')
        )
