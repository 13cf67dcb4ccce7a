from rest_framework.response import Response

from ..bullspay import BullsPayError
from ..exceptions import LedgerError


def error_response(exc):
    """Map ledger / gateway failures onto the JSON error shape the API uses."""
    if isinstance(exc, LedgerError):
        body = {"error": str(exc)}
        allowed = getattr(exc, "allowed_bets", None)
        if allowed is not None:
            body["allowed_bets"] = [float(b) for b in allowed]
        return Response(body, status=exc.status_code)
    if isinstance(exc, BullsPayError):
        return Response({"error": str(exc)}, status=502)
    raise exc
