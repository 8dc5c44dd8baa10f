"""Management command to delete revocations of expired refresh tokens."""

from typing import Any

from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.accounts.logic.token_operations import (
    purge_expired_revocations,
)
from server.apps.accounts.models import RevokedToken


class Command(BaseCommand):
    """Remove revocation rows that outlived their tokens."""

    help = 'Delete revoked refresh tokens that have already expired'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many rows would be deleted without deleting',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the purge command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['dry_run']:
            count = RevokedToken.objects.filter(
                expires_at__lte=timezone.now(),
            ).count()
            self.stdout.write(
                self.style.SUCCESS(f'Would purge {count} revoked tokens'),
            )
            return

        count = purge_expired_revocations()
        self.stdout.write(
            self.style.SUCCESS(f'Purged {count} revoked tokens'),
        )
