# wallets/management/commands/expire_pending_deposits.py
from django.core.management.base import BaseCommand
from django.utils import timezone

from wallets.models import WalletTransaction
from wallets.services import expire_pending_deposits


class Command(BaseCommand):
    help = 'Expire PIX deposits still pending after their expiry time'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without actually expiring'
        )

    def handle(self, *args, **options):
        now = timezone.now()
        stale = WalletTransaction.objects.filter(
            tx_type=WalletTransaction.DEPOSIT,
            status=WalletTransaction.STATUS_PENDING,
            expires_at__lt=now,
        ).order_by('created_at')

        count = stale.count()
        if count == 0:
            self.stdout.write(self.style.SUCCESS('No stale deposits found.'))
            return

        self.stdout.write(self.style.WARNING(f'Found {count} stale deposit(s):'))
        for tx in stale:
            self.stdout.write(
                f"  {tx.pk} | User: {tx.user_id} | R$ {tx.amount:,.2f} | "
                f"Expired: {tx.expires_at.strftime('%Y-%m-%d %H:%M')}"
            )

        if options['dry_run']:
            self.stdout.write(self.style.SUCCESS(f'DRY RUN: Would expire {count} deposit(s)'))
            return

        expired = expire_pending_deposits(now=now)
        self.stdout.write(self.style.SUCCESS(f'Expired {expired} deposit(s)'))
