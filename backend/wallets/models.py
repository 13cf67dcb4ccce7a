import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q


class Wallet(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet",
    )
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    # Bet volume still to be wagered before a withdrawal is allowed
    rollover_required = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    first_deposit_made = models.BooleanField(default=False)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(balance__gte=0), name="wallet_balance_non_negative"),
            models.CheckConstraint(condition=Q(rollover_required__gte=0), name="wallet_rollover_non_negative"),
        ]

    def __str__(self):
        return f"Wallet({self.user_id})"


class WalletTransaction(models.Model):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TX_TYPE_CHOICES = [
        (DEPOSIT, "Deposit"),
        (WITHDRAWAL, "Withdrawal"),
    ]

    STATUS_PENDING = "pending"
    STATUS_PAID = "paid"
    STATUS_FAILED = "failed"
    STATUS_REFUNDED = "refunded"
    STATUS_CANCELED = "canceled"
    STATUS_CHARGEBACK = "chargeback"
    STATUS_EXPIRED = "expired"
    STATUS_PENDING_APPROVAL = "pending_approval"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    # Money effects for these have been applied; only the listed exits are accepted
    SETTLED_STATUSES = (
        STATUS_PAID,
        STATUS_REFUNDED,
        STATUS_CHARGEBACK,
        STATUS_FAILED,
        STATUS_CANCELED,
        STATUS_REJECTED,
    )
    SETTLED_EXITS = (
        (STATUS_PAID, STATUS_REFUNDED),
        (STATUS_PAID, STATUS_CHARGEBACK),
    )

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PAID, "Paid"),
        (STATUS_FAILED, "Failed"),
        (STATUS_REFUNDED, "Refunded"),
        (STATUS_CANCELED, "Canceled"),
        (STATUS_CHARGEBACK, "Chargeback"),
        (STATUS_EXPIRED, "Expired"),
        (STATUS_PENDING_APPROVAL, "Pending approval"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wallet_txs"
    )
    tx_type = models.CharField(max_length=20, choices=TX_TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    gateway_id = models.CharField(max_length=128, blank=True, null=True, db_index=True)
    gateway_data = models.JSONField(default=dict, blank=True)
    pix_qr_code = models.TextField(blank=True, default="")
    pix_qr_code_base64 = models.TextField(blank=True, default="")
    pix_key_type = models.CharField(max_length=20, blank=True, default="")
    pix_key = models.CharField(max_length=255, blank=True, default="")
    expires_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"], name="wallets_wal_user_id_5c1e2d_idx"),
            models.Index(fields=["status"], name="wallets_wal_status_8b7f3a_idx"),
        ]

    def __str__(self):
        return f"{self.tx_type} {self.amount} for {self.user_id} ({self.status})"
