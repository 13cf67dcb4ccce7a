# scratch/defaults.py
from decimal import Decimal

GAME_TYPE = "scratch_card"

ALLOWED_BETS = tuple(
    Decimal(v)
    for v in (
        "0.50", "1.00", "1.50", "2.00", "3.00",
        "5.00", "10.00", "15.00", "20.00", "25.00",
        "30.00", "35.00", "40.00", "45.00", "50.00",
    )
)

RTP_SETTING_KEY = "rtp_percentage"
DEFAULT_RTP = Decimal("95.0")

# Multipliers are calibrated against this RTP; other values scale them linearly.
REFERENCE_RTP = Decimal("95.0")

RTP_MIN = Decimal("50")
RTP_MAX = Decimal("99")
