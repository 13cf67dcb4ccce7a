import logging
import time
from contextlib import contextmanager
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from .bullspay import BullsPayError, BullsPayService, to_centavos
from .exceptions import (
    InsufficientFunds,
    InvalidAmount,
    NotFound,
    StorageFailure,
    TransactionStateError,
    WithdrawalError,
)
from .models import Wallet, WalletTransaction

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


# ======================================================
# INTERNAL
# ======================================================
@contextmanager
def storage_guard():
    """Re-raise database failures as StorageFailure once the transaction is gone."""
    try:
        yield
    except DatabaseError as e:
        logger.error("Ledger storage failure: %s", e)
        raise StorageFailure("Storage failure, nothing was committed") from e


def to_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount("Invalid amount")
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount("Invalid amount")
    return amount


def _get_tx_for_update(tx_id, **filters):
    try:
        return WalletTransaction.objects.select_for_update().get(pk=tx_id, **filters)
    except (WalletTransaction.DoesNotExist, ValidationError):
        raise NotFound("Transaction not found")


# ======================================================
# LEDGER HANDLE
# ======================================================
@contextmanager
def ledger_handle(user_id):
    """
    Exclusive read-modify-write access to one user's wallet row.

    Opens a transaction and locks the row (SELECT ... FOR UPDATE); the lock
    is held until the block exits. Normal exit commits, any exception rolls
    back every write made inside the block.
    """
    with storage_guard():
        with transaction.atomic():
            try:
                wallet = Wallet.objects.select_for_update().get(user_id=user_id)
            except Wallet.DoesNotExist:
                raise NotFound("User not found")
            yield wallet


def get_wallet(user_id):
    try:
        return Wallet.objects.get(user_id=user_id)
    except Wallet.DoesNotExist:
        raise NotFound("User not found")


def credit_balance(user_id, amount: Decimal) -> Decimal:
    with ledger_handle(user_id) as wallet:
        wallet.balance += amount
        wallet.save(update_fields=["balance", "updated_at"])
        return wallet.balance


def debit_balance(user_id, amount: Decimal) -> Decimal:
    with ledger_handle(user_id) as wallet:
        if wallet.balance < amount:
            raise InsufficientFunds("Insufficient balance")
        wallet.balance -= amount
        wallet.save(update_fields=["balance", "updated_at"])
        return wallet.balance


# ======================================================
# ROLLOVER ACTIVATION
# ======================================================
def activate_first_deposit_rollover(user_id, deposit_amount) -> bool:
    """
    Grant the first-deposit rollover requirement exactly once per user.

    The flag check and the increment are one conditional UPDATE, so two
    callers racing on the same user can never both apply it. Returns True
    only for the call that performed the activation.
    """
    amount = Decimal(str(deposit_amount))

    with storage_guard():
        with transaction.atomic():
            updated = Wallet.objects.filter(
                user_id=user_id,
                first_deposit_made=False,
            ).update(
                rollover_required=F("rollover_required") + amount,
                first_deposit_made=True,
                updated_at=timezone.now(),
            )

    if updated:
        logger.info("First deposit rollover of %s applied for user %s", amount, user_id)
    return updated == 1


# ======================================================
# DEPOSITS
# ======================================================
def create_deposit(user, amount, gateway=None):
    amount = to_amount(amount)
    minimum = settings.DEPOSIT_MIN_AMOUNT
    if amount < minimum:
        raise InvalidAmount(f"Minimum deposit is R$ {minimum:.2f}")

    gateway = gateway or BullsPayService()
    charge = gateway.create_transaction(
        amount=amount,
        buyer_name=user.username,
        buyer_email=user.email,
        buyer_document=user.cpf,
        external_id=f"dep_{user.id}_{int(time.time() * 1000)}",
    )

    expires_at = timezone.now() + timedelta(minutes=settings.DEPOSIT_EXPIRY_MINUTES)

    with storage_guard():
        tx = WalletTransaction.objects.create(
            user=user,
            tx_type=WalletTransaction.DEPOSIT,
            amount=amount,
            status=charge["status"],
            gateway_id=charge["unic_id"],
            gateway_data=charge["raw"],
            pix_qr_code=charge["qr_code_text"] or "",
            pix_qr_code_base64=charge["qr_code_base64"] or "",
            expires_at=expires_at,
        )

    logger.info("Deposit %s created for user %s: R$ %s", tx.pk, user.id, amount)
    return tx, charge


def apply_gateway_status(tx_id, new_status, gateway_data=None) -> bool:
    """
    Record a gateway status for a wallet transaction and apply its money effects.

    Used by both the webhook receiver and the polling checker; the
    transaction row is locked, so a status transition is applied once no
    matter how many times it is observed. Settled transactions only accept
    paid -> refunded / chargeback. Returns False when the status was already
    recorded or the transition was ignored.
    """
    with storage_guard():
        with transaction.atomic():
            tx = _get_tx_for_update(tx_id)
            previous = tx.status

            if previous == new_status:
                return False

            if (
                previous in WalletTransaction.SETTLED_STATUSES
                and (previous, new_status) not in WalletTransaction.SETTLED_EXITS
            ):
                logger.warning(
                    "Ignoring %s -> %s for settled transaction %s", previous, new_status, tx.pk
                )
                return False

            tx.status = new_status
            if gateway_data is not None:
                tx.gateway_data = gateway_data
            tx.save(update_fields=["status", "gateway_data", "updated_at"])

            # previous is unsettled here, so each effect below runs at most once
            if tx.tx_type == WalletTransaction.DEPOSIT and new_status == WalletTransaction.STATUS_PAID:
                credit_balance(tx.user_id, tx.amount)
                activate_first_deposit_rollover(tx.user_id, tx.amount)
                logger.info("Deposit %s paid, credited R$ %s to user %s", tx.pk, tx.amount, tx.user_id)

            failed = (WalletTransaction.STATUS_FAILED, WalletTransaction.STATUS_CANCELED)
            if tx.tx_type == WalletTransaction.WITHDRAWAL and new_status in failed:
                credit_balance(tx.user_id, tx.amount)
                logger.info("Withdrawal %s %s, refunded R$ %s to user %s", tx.pk, new_status, tx.amount, tx.user_id)

    return True


def check_deposit(user, tx_id, gateway=None):
    """Polling path: expire stale deposits, otherwise ask the gateway for news."""
    try:
        tx = WalletTransaction.objects.get(pk=tx_id, user=user, tx_type=WalletTransaction.DEPOSIT)
    except (WalletTransaction.DoesNotExist, ValidationError):
        raise NotFound("Transaction not found")

    if (
        tx.status == WalletTransaction.STATUS_PENDING
        and tx.expires_at
        and timezone.now() > tx.expires_at
    ):
        WalletTransaction.objects.filter(
            pk=tx.pk, status=WalletTransaction.STATUS_PENDING
        ).update(status=WalletTransaction.STATUS_EXPIRED, updated_at=timezone.now())
        tx.refresh_from_db()
        return tx

    if tx.status in (WalletTransaction.STATUS_PAID, WalletTransaction.STATUS_EXPIRED):
        return tx

    gateway = gateway or BullsPayService()
    remote = gateway.list_transactions(id=tx.gateway_id, limit=1)["transactions"]

    if remote and remote[0].get("status") and remote[0]["status"] != tx.status:
        apply_gateway_status(tx.pk, remote[0]["status"], remote[0])
        tx.refresh_from_db()

    return tx


def expire_pending_deposits(now=None) -> int:
    now = now or timezone.now()
    with storage_guard():
        return WalletTransaction.objects.filter(
            tx_type=WalletTransaction.DEPOSIT,
            status=WalletTransaction.STATUS_PENDING,
            expires_at__lt=now,
        ).update(status=WalletTransaction.STATUS_EXPIRED, updated_at=now)


def refund_deposit(tx_id, gateway=None):
    gateway = gateway or BullsPayService()

    with storage_guard():
        with transaction.atomic():
            tx = _get_tx_for_update(tx_id)

            if tx.tx_type != WalletTransaction.DEPOSIT or tx.status != WalletTransaction.STATUS_PAID:
                raise TransactionStateError("Only paid deposits can be refunded")

            # Debit first: a gateway failure below rolls this back.
            debit_balance(tx.user_id, tx.amount)
            gateway.refund_transaction(tx.gateway_id)

            tx.status = WalletTransaction.STATUS_REFUNDED
            tx.save(update_fields=["status", "updated_at"])

    logger.info("Deposit %s refunded (R$ %s)", tx.pk, tx.amount)
    return tx


# ======================================================
# WITHDRAWALS
# ======================================================
def request_withdrawal(user, amount, pix_key_type, pix_key=""):
    amount = to_amount(amount)
    minimum = settings.WITHDRAWAL_MIN_AMOUNT
    if amount < minimum:
        raise InvalidAmount(f"Minimum withdrawal is R$ {minimum:.2f}")

    pix_key = (pix_key or "").strip()
    if not pix_key:
        if pix_key_type == "cpf":
            pix_key = user.cpf
        elif pix_key_type == "email":
            pix_key = user.email
    if not pix_key:
        raise WithdrawalError("PIX key is required")

    with ledger_handle(user.id) as wallet:
        if wallet.rollover_required > 0:
            raise WithdrawalError(
                f"You still need to wager R$ {wallet.rollover_required:.2f} before withdrawing"
            )
        if wallet.balance < amount:
            raise InsufficientFunds("Insufficient balance")

        wallet.balance -= amount
        wallet.save(update_fields=["balance", "updated_at"])

        tx = WalletTransaction.objects.create(
            user=user,
            tx_type=WalletTransaction.WITHDRAWAL,
            amount=amount,
            status=WalletTransaction.STATUS_PENDING_APPROVAL,
            pix_key_type=pix_key_type or "",
            pix_key=pix_key,
        )

    logger.info("Withdrawal %s requested by user %s: R$ %s", tx.pk, user.id, amount)
    return tx


def approve_withdrawal(tx_id, gateway=None):
    """
    Send a pending withdrawal to the gateway.
    A gateway failure refunds the player, marks the withdrawal failed and re-raises.
    """
    gateway = gateway or BullsPayService()
    error = None

    with storage_guard():
        with transaction.atomic():
            tx = _get_tx_for_update(tx_id, tx_type=WalletTransaction.WITHDRAWAL)

            if tx.status != WalletTransaction.STATUS_PENDING_APPROVAL:
                raise TransactionStateError("Only pending withdrawals can be approved")

            available = gateway.get_balance()["available_balance"]
            required = to_centavos(tx.amount)
            if available < required:
                raise WithdrawalError(
                    f"Insufficient gateway balance. Available: R$ {available / 100:.2f}, "
                    f"required: R$ {required / 100:.2f}"
                )

            try:
                payout = gateway.request_withdrawal(
                    amount=tx.amount,
                    pix_key_type=tx.pix_key_type,
                    pix_key=tx.pix_key,
                )
            except BullsPayError as e:
                credit_balance(tx.user_id, tx.amount)
                tx.status = WalletTransaction.STATUS_FAILED
                tx.admin_notes = f"Gateway payout failed: {e}"
                tx.save(update_fields=["status", "admin_notes", "updated_at"])
                error = e
            else:
                tx.status = WalletTransaction.STATUS_APPROVED
                tx.gateway_id = payout["unic_id"]
                tx.gateway_data = payout["raw"]
                tx.admin_notes = "Approved by admin"
                tx.save(update_fields=["status", "gateway_id", "gateway_data", "admin_notes", "updated_at"])

    if error is not None:
        logger.error("Withdrawal %s failed at gateway, refunded: %s", tx.pk, error)
        raise error

    logger.info("Withdrawal %s approved (R$ %s)", tx.pk, tx.amount)
    return tx


def reject_withdrawal(tx_id, reason=None):
    with storage_guard():
        with transaction.atomic():
            tx = _get_tx_for_update(tx_id, tx_type=WalletTransaction.WITHDRAWAL)

            if tx.status != WalletTransaction.STATUS_PENDING_APPROVAL:
                raise TransactionStateError("Only pending withdrawals can be rejected")

            credit_balance(tx.user_id, tx.amount)

            tx.status = WalletTransaction.STATUS_REJECTED
            tx.admin_notes = reason or "Rejected by admin"
            tx.save(update_fields=["status", "admin_notes", "updated_at"])

    logger.info("Withdrawal %s rejected, R$ %s returned to user %s", tx.pk, tx.amount, tx.user_id)
    return tx


def check_withdrawal(user, tx_id, gateway=None):
    """Polling path for withdrawals already handed to the gateway."""
    try:
        tx = WalletTransaction.objects.get(pk=tx_id, user=user, tx_type=WalletTransaction.WITHDRAWAL)
    except (WalletTransaction.DoesNotExist, ValidationError):
        raise NotFound("Transaction not found")

    settled = (
        WalletTransaction.STATUS_PAID,
        WalletTransaction.STATUS_FAILED,
        WalletTransaction.STATUS_CANCELED,
    )
    if tx.status in settled or not tx.gateway_id:
        return tx

    gateway = gateway or BullsPayService()
    remote = gateway.list_withdrawals(id=tx.gateway_id, limit=1)["withdrawals"]

    if remote and remote[0].get("status") and remote[0]["status"] != tx.status:
        apply_gateway_status(tx.pk, remote[0]["status"], remote[0])
        tx.refresh_from_db()

    return tx
