# scratch/views.py
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from wallets.views.errors import error_response

from .defaults import ALLOWED_BETS
from .exceptions import LedgerError
from .models import GameRound
from .serializers import GameRoundSerializer
from .services import play_round

MAX_HISTORY = 100


# =====================================================
# PLAY
# =====================================================

@api_view(["POST"])
@permission_classes([IsAuthenticated])
def play(request):
    # Non-object JSON bodies carry no bet
    getter = getattr(request.data, "get", None)
    bet_amount = getter("betAmount") if getter else None

    try:
        result = play_round(request.user.id, bet_amount)
    except LedgerError as e:
        return error_response(e)

    return Response(result.as_dict())


# =====================================================
# HISTORY
# =====================================================

@api_view(["GET"])
@permission_classes([IsAuthenticated])
def history(request):
    try:
        limit = int(request.query_params.get("limit", 20))
    except ValueError:
        limit = 20
    limit = max(1, min(limit, MAX_HISTORY))

    rounds = GameRound.objects.filter(user=request.user).order_by("-created_at")[:limit]
    return Response({
        "success": True,
        "rounds": GameRoundSerializer(rounds, many=True).data,
    })


# =====================================================
# ALLOWED BETS
# =====================================================

@api_view(["GET"])
@permission_classes([AllowAny])
def bets(request):
    return Response({"bets": [float(b) for b in ALLOWED_BETS]})
