# wallets/bullspay.py
import hmac
import logging
import re
import time
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class BullsPayError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def to_centavos(amount) -> int:
    """BRL amount -> integer centavos, as the gateway expects."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_pix_key(pix_key, pix_key_type):
    """
    Normalize a PIX key for the gateway:
    CPF/CNPJ/phone -> digits only, email -> trimmed lowercase,
    random -> trimmed.
    """
    if not pix_key:
        return ""

    if pix_key_type in ("cpf", "cnpj", "phone"):
        return re.sub(r"\D", "", pix_key)
    if pix_key_type == "email":
        return pix_key.strip().lower()
    if pix_key_type == "random":
        return pix_key.strip()
    return pix_key


def is_valid_webhook_source(headers) -> bool:
    """Webhook calls carry our private key in X-API-Key or as a Bearer token."""
    api_key = headers.get("X-API-Key") or headers.get("Authorization")
    expected = getattr(settings, "BULLSPAY_API_KEY", None)

    if not api_key or not expected:
        return False

    return hmac.compare_digest(api_key, expected) or hmac.compare_digest(
        api_key, f"Bearer {expected}"
    )


class BullsPayService:
    """
    BullsPay PIX gateway client.
    Amounts go out in centavos; responses are unwrapped from {"success", "data"}.
    """

    def __init__(self):
        self.base_url = getattr(settings, "BULLSPAY_BASE_URL", "https://api-gateway.bullspay.com.br/api")
        self.client_id = getattr(settings, "BULLSPAY_CLIENT_ID", None)
        self.api_key = getattr(settings, "BULLSPAY_API_KEY", None)
        self.timeout = getattr(settings, "BULLSPAY_TIMEOUT", 30)
        self.max_retries = getattr(settings, "BULLSPAY_MAX_RETRIES", 2)

        if not self.client_id or not self.api_key:
            raise RuntimeError("BULLSPAY_CLIENT_ID and BULLSPAY_API_KEY must be set")

        self.session = self._create_session()

    def _create_session(self):
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            backoff_factor=1,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)

        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _headers(self):
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Public-Key": self.client_id,
            "X-Private-Key": self.api_key,
        }

    def _request(self, method, endpoint, **kwargs):
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self.session.request(method, url, headers=self._headers(), **kwargs)
        except requests.RequestException as e:
            logger.error("BullsPay %s %s failed: %s", method, endpoint, e)
            raise BullsPayError(f"Unable to reach BullsPay: {e}") from e

        if not response.ok:
            logger.error("BullsPay %s %s -> %s: %s", method, endpoint, response.status_code, response.text[:200])
            raise BullsPayError(
                f"BullsPay error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise BullsPayError("Invalid response from BullsPay", status_code=response.status_code) from e

    # ---------------------------------------------------
    # TRANSACTIONS (DEPOSITS)
    # ---------------------------------------------------
    def create_transaction(self, amount, buyer_name, buyer_email, buyer_document, buyer_phone="", external_id=None):
        payload = {
            "amount": to_centavos(amount),
            "buyer_infos": {
                "buyer_name": buyer_name,
                "buyer_email": buyer_email,
                "buyer_document": buyer_document,
                "buyer_phone": buyer_phone,
            },
            "external_id": external_id or f"tx_{int(time.time() * 1000)}",
            "payment_method": "pix",
        }

        data = self._request("POST", "/transactions/create", json=payload)
        body = data.get("data") or {}
        payment = body.get("payment_data") or {}
        pix = body.get("pix_data") or {}

        return {
            "success": data.get("success"),
            "unic_id": payment.get("id"),
            "status": payment.get("status") or "pending",
            "total_value": payment.get("amount"),
            "payment_url": body.get("payment_url"),
            "qr_code_base64": pix.get("qrcode_base64"),
            "qr_code_text": pix.get("qrcode"),
            "created_at": payment.get("created_at"),
            "raw": data,
        }

    def list_transactions(self, page=1, limit=10, status="all", id=""):
        params = {"page": page, "limit": limit, "status": status}
        if id:
            params["id"] = id

        data = self._request("GET", "/transactions/list", params=params)
        body = data.get("data") or {}
        return {
            "success": data.get("success"),
            "transactions": body.get("transactions") or [],
            "pagination": body.get("pagination") or {},
        }

    def refund_transaction(self, unic_id):
        return self._request("PUT", f"/transactions/refund/{unic_id}")

    # ---------------------------------------------------
    # WITHDRAWALS
    # ---------------------------------------------------
    def get_balance(self):
        data = self._request("GET", "/withdrawals/balance")
        body = data.get("data") or {}
        return {
            "success": data.get("success"),
            "balance": body.get("balance") or 0,
            "available_balance": body.get("available_balance") or 0,
            "blocked_balance": body.get("blocked_balance") or 0,
        }

    def request_withdrawal(self, amount, pix_key_type, pix_key):
        payload = {
            "amount": to_centavos(amount),
            "pix_key_type": pix_key_type,
            "pix_key": format_pix_key(pix_key, pix_key_type),
        }

        data = self._request("POST", "/withdrawals/request", json=payload)
        body = data.get("data") or {}
        return {
            "success": data.get("success"),
            "unic_id": body.get("unic_id"),
            "status": body.get("status"),
            "amount": body.get("amount"),
            "pix_key_type": body.get("pix_key_type"),
            "pix_key": body.get("pix_key"),
            "created_at": body.get("created_at"),
            "raw": data,
        }

    def list_withdrawals(self, page=1, limit=10, status="all", id=""):
        params = {"page": page, "limit": limit, "status": status}
        if id:
            params["id"] = id

        data = self._request("GET", "/withdrawals/list", params=params)
        body = data.get("data") or {}
        return {
            "success": data.get("success"),
            "withdrawals": body.get("withdrawals") or [],
            "pagination": body.get("pagination") or {},
        }

    # ---------------------------------------------------
    # WEBHOOKS
    # ---------------------------------------------------
    def list_webhooks(self, page=1, limit=10):
        data = self._request("GET", "/webhooks/list", params={"page": page, "limit": limit})
        body = data.get("data") or {}
        return {
            "success": data.get("success"),
            "webhooks": body.get("webhooks") or [],
            "pagination": body.get("pagination") or {},
        }

    def create_webhook(self, url, send_transaction_event=True, send_withdraw_event=False):
        payload = {
            "url": url,
            "send_transaction_event": send_transaction_event,
            "send_withdraw_event": send_withdraw_event,
        }
        return self._request("POST", "/webhooks/create", json=payload)

    def delete_webhook(self, unic_id):
        return self._request("DELETE", f"/webhooks/{unic_id}")
