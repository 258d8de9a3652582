"""
Management command to issue tracking codes to containers without one.

Usage:
    python manage.py issue_tracking_codes
    python manage.py issue_tracking_codes --dry-run
"""

from django.core.management.base import BaseCommand

from shipman import ship
from shipman.models import Container


class Command(BaseCommand):
    """Issue missing tracking codes command."""

    help = 'Gera códigos de rastreio para contêineres sem código'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Mostra quantos códigos seriam gerados sem executar'
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            missing = Container.objects.missing_tracking_code().count()
            self.stdout.write(f'{missing} código(s) seria(m) gerado(s)')
        else:
            count = ship.issue_missing_codes()
            self.stdout.write(
                self.style.SUCCESS(f'{count} código(s) gerado(s)')
            )
