# sa_conf/views.py
import logging

from django.contrib.auth import get_user_model
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from accounts.serializers import AdminUserSerializer
from scratch.defaults import RTP_SETTING_KEY
from scratch.services import read_rtp
from wallets import services as wallet_services
from wallets.bullspay import BullsPayError, BullsPayService
from wallets.exceptions import LedgerError
from wallets.models import WalletTransaction
from wallets.serializers import AdminTransactionSerializer, WalletTransactionSerializer
from wallets.views.errors import error_response

from .serializers import RejectSerializer, RTPSerializer, WebhookSerializer
from .services import get_setting, set_setting

logger = logging.getLogger(__name__)

User = get_user_model()


def _int_param(request, name, default, maximum=None):
    try:
        value = int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return min(value, maximum) if maximum else value


# =====================================================
# RTP
# =====================================================

@api_view(["GET", "POST"])
@permission_classes([IsAdminUser])
def rtp(request):
    if request.method == "GET":
        return Response({"rtp": float(read_rtp(get_setting))})

    serializer = RTPSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({"error": "RTP must be between 50 and 99"}, status=400)

    value = serializer.validated_data["rtp"]
    set_setting(RTP_SETTING_KEY, str(value))
    logger.info("RTP set to %s by %s", value, request.user.email)

    return Response({"success": True, "rtp": float(value)})


# =====================================================
# USERS / TRANSACTIONS
# =====================================================

@api_view(["GET"])
@permission_classes([IsAdminUser])
def users(request):
    qs = User.objects.select_related("wallet").order_by("-date_joined")
    return Response({"users": AdminUserSerializer(qs, many=True).data})


@api_view(["GET"])
@permission_classes([IsAdminUser])
def transactions(request):
    qs = WalletTransaction.objects.select_related("user").order_by("-created_at")

    status_filter = request.query_params.get("status")
    if status_filter and status_filter != "all":
        qs = qs.filter(status=status_filter)

    limit = _int_param(request, "limit", 50, maximum=500)
    return Response({"transactions": AdminTransactionSerializer(qs[:limit], many=True).data})


# =====================================================
# WITHDRAWALS
# =====================================================

@api_view(["POST"])
@permission_classes([IsAdminUser])
def approve_withdrawal(request, tx_id):
    try:
        tx = wallet_services.approve_withdrawal(tx_id)
    except (LedgerError, BullsPayError) as e:
        return error_response(e)

    return Response({"success": True, "transaction": WalletTransactionSerializer(tx).data})


@api_view(["POST"])
@permission_classes([IsAdminUser])
def reject_withdrawal(request, tx_id):
    serializer = RejectSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        tx = wallet_services.reject_withdrawal(tx_id, serializer.validated_data.get("reason"))
    except LedgerError as e:
        return error_response(e)

    return Response({"success": True, "transaction": WalletTransactionSerializer(tx).data})


@api_view(["POST"])
@permission_classes([IsAdminUser])
def refund_deposit(request, tx_id):
    try:
        tx = wallet_services.refund_deposit(tx_id)
    except (LedgerError, BullsPayError) as e:
        return error_response(e)

    return Response({"success": True, "transaction": WalletTransactionSerializer(tx).data})


# =====================================================
# GATEWAY
# =====================================================

@api_view(["GET"])
@permission_classes([IsAdminUser])
def gateway_balance(request):
    try:
        balance = BullsPayService().get_balance()
    except BullsPayError as e:
        return error_response(e)

    return Response({
        "balance": balance["balance"] / 100,
        "available_balance": balance["available_balance"] / 100,
        "blocked_balance": balance["blocked_balance"] / 100,
    })


def _gateway_list_params(request):
    return {
        "page": _int_param(request, "page", 1),
        "limit": _int_param(request, "limit", 20, maximum=100),
        "status": request.query_params.get("status") or "all",
    }


@api_view(["GET"])
@permission_classes([IsAdminUser])
def gateway_transactions(request):
    try:
        listing = BullsPayService().list_transactions(**_gateway_list_params(request))
    except BullsPayError as e:
        return error_response(e)

    return Response(listing)


@api_view(["GET"])
@permission_classes([IsAdminUser])
def gateway_withdrawals(request):
    try:
        listing = BullsPayService().list_withdrawals(**_gateway_list_params(request))
    except BullsPayError as e:
        return error_response(e)

    return Response(listing)


@api_view(["GET", "POST"])
@permission_classes([IsAdminUser])
def webhooks(request):
    gateway = BullsPayService()

    if request.method == "GET":
        try:
            return Response(gateway.list_webhooks())
        except BullsPayError as e:
            return error_response(e)

    serializer = WebhookSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        created = gateway.create_webhook(**serializer.validated_data)
    except BullsPayError as e:
        return error_response(e)

    return Response(created, status=201)


@api_view(["DELETE"])
@permission_classes([IsAdminUser])
def delete_webhook(request, webhook_id):
    try:
        BullsPayService().delete_webhook(webhook_id)
    except BullsPayError as e:
        return error_response(e)

    return Response({"success": True})
