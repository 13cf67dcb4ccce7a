from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..bullspay import BullsPayError
from ..exceptions import LedgerError
from ..models import Wallet, WalletTransaction
from ..serializers import (
    DepositSerializer,
    WalletSerializer,
    WalletTransactionSerializer,
    WithdrawalSerializer,
)
from .. import services
from .errors import error_response


class WalletViewSet(viewsets.GenericViewSet):
    """
    Wallet API:
    - balance
    - transactions
    - deposit (PIX charge) + polling check
    - withdraw (manual approval) + polling check
    """

    permission_classes = [IsAuthenticated]
    serializer_class = WalletSerializer

    def get_queryset(self):
        return Wallet.objects.filter(user=self.request.user)

    # ---------------------------------------------------
    # BALANCE
    # ---------------------------------------------------
    @action(detail=False, methods=["get"])
    def balance(self, request):
        try:
            wallet = services.get_wallet(request.user.id)
        except LedgerError as e:
            return error_response(e)
        return Response({"success": True, **self.get_serializer(wallet).data})

    # ---------------------------------------------------
    # TRANSACTIONS
    # ---------------------------------------------------
    @action(detail=False, methods=["get"])
    def transactions(self, request):
        try:
            limit = min(int(request.query_params.get("limit", 20)), 100)
        except ValueError:
            limit = 20

        txs = WalletTransaction.objects.filter(user=request.user).order_by("-created_at")[:limit]
        return Response({
            "success": True,
            "transactions": WalletTransactionSerializer(txs, many=True).data,
        })

    # ---------------------------------------------------
    # DEPOSIT (PIX CHARGE)
    # ---------------------------------------------------
    @action(detail=False, methods=["post"])
    def deposit(self, request):
        serializer = DepositSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            tx, charge = services.create_deposit(request.user, serializer.validated_data["amount"])
        except (LedgerError, BullsPayError) as e:
            return error_response(e)

        return Response({
            "success": True,
            "transaction": WalletTransactionSerializer(tx).data,
            "qr_code": charge["qr_code_text"],
            "qr_code_base64": charge["qr_code_base64"],
            "payment_url": charge["payment_url"],
            "expires_at": tx.expires_at,
        })

    @action(detail=False, methods=["get"], url_path=r"deposit/(?P<tx_id>[0-9a-f-]+)/check")
    def deposit_check(self, request, tx_id=None):
        try:
            tx = services.check_deposit(request.user, tx_id)
        except (LedgerError, BullsPayError) as e:
            return error_response(e)

        return Response({
            "success": True,
            "status": tx.status,
            "transaction": WalletTransactionSerializer(tx).data,
        })

    # ---------------------------------------------------
    # WITHDRAW (PENDING ADMIN APPROVAL)
    # ---------------------------------------------------
    @action(detail=False, methods=["post"])
    def withdraw(self, request):
        serializer = WithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            tx = services.request_withdrawal(
                request.user,
                data["amount"],
                data["pix_key_type"],
                data.get("pix_key", ""),
            )
        except LedgerError as e:
            return error_response(e)

        return Response({
            "success": True,
            "transaction": WalletTransactionSerializer(tx).data,
            "message": "Withdrawal under review. You will be notified once it is approved.",
        })

    @action(detail=False, methods=["get"], url_path=r"withdrawal/(?P<tx_id>[0-9a-f-]+)/check")
    def withdrawal_check(self, request, tx_id=None):
        try:
            tx = services.check_withdrawal(request.user, tx_id)
        except (LedgerError, BullsPayError) as e:
            return error_response(e)

        return Response({
            "success": True,
            "status": tx.status,
            "transaction": WalletTransactionSerializer(tx).data,
        })
