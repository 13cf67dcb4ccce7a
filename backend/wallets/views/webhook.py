import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from ..bullspay import is_valid_webhook_source
from ..exceptions import NotFound, StorageFailure
from ..models import WalletTransaction
from ..services import apply_gateway_status

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def bullspay_webhook(request):
    # 🔐 Verify source
    if not is_valid_webhook_source(request.headers):
        logger.warning("BullsPay webhook with invalid credentials")
        return JsonResponse({"error": "Unauthorized"}, status=401)

    try:
        event_data = json.loads(request.body or b"{}")
    except ValueError:
        logger.warning("BullsPay webhook with invalid JSON body")
        return JsonResponse({"ok": True})

    data = event_data.get("data") if isinstance(event_data, dict) else None
    if not isinstance(data, dict):
        return JsonResponse({"ok": True})

    unic_id = data.get("unic_id") or data.get("id")
    new_status = data.get("status")

    logger.info("BULLSPAY WEBHOOK RECEIVED: %s -> %s", unic_id, new_status)

    if not unic_id or not new_status:
        return JsonResponse({"ok": True})

    wallet_tx = WalletTransaction.objects.filter(gateway_id=unic_id).first()
    if not wallet_tx:
        logger.error("Webhook TX not found: %s", unic_id)
        return JsonResponse({"ok": True})

    try:
        changed = apply_gateway_status(wallet_tx.pk, new_status, data)
    except NotFound:
        return JsonResponse({"ok": True})
    except StorageFailure:
        # Non-2xx makes the gateway retry.
        return JsonResponse({"error": "Storage failure"}, status=500)

    if not changed:
        logger.info("Webhook ignored, status already recorded: %s", unic_id)

    return JsonResponse({"ok": True})
