# scratch/engine.py
from __future__ import annotations

import random
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from .defaults import REFERENCE_RTP

D0 = Decimal("0")
CENT = Decimal("0.01")

# (minimum bet, bonus chance), highest first
BONUS_TIERS = (
    (Decimal("50"), Decimal("0.15")),
    (Decimal("30"), Decimal("0.12")),
    (Decimal("20"), Decimal("0.09")),
    (Decimal("10"), Decimal("0.06")),
    (Decimal("5"), Decimal("0.03")),
)

# (base cut point, bonus weight, multiplier), ascending
PRIZE_BANDS = (
    (Decimal("0.02"), Decimal("0.15"), 10),
    (Decimal("0.07"), Decimal("0.30"), 5),
    (Decimal("0.22"), Decimal("0.40"), 2),
    (Decimal("0.50"), Decimal("0.15"), 1),
)


def round_half_up(x: Decimal, places: Decimal = CENT) -> Decimal:
    return x.quantize(places, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PrizeResult:
    multiplier: Decimal
    prize_amount: Decimal
    base_multiplier: int
    draw: Decimal


def bonus_chance(bet_amount: Decimal) -> Decimal:
    """Bigger bets get better odds."""
    for minimum, chance in BONUS_TIERS:
        if bet_amount >= minimum:
            return chance
    return D0


def thresholds(bet_amount: Decimal) -> tuple[Decimal, ...]:
    b = bonus_chance(bet_amount)
    return tuple(base + b * weight for base, weight, _ in PRIZE_BANDS)


def base_multiplier(draw: Decimal, bet_amount: Decimal) -> int:
    for cut, (_, _, multiplier) in zip(thresholds(bet_amount), PRIZE_BANDS):
        if draw < cut:
            return multiplier
    return 0


def compute_prize(bet_amount, rtp_percentage, draw=None) -> PrizeResult:
    """
    Draw a scratch card outcome.

    The base table (10x / 5x / 2x / 1x / nothing) is tuned for a 95% RTP;
    the configured RTP scales every multiplier by rtp / 95.
    """
    bet = Decimal(str(bet_amount))
    rtp = Decimal(str(rtp_percentage))
    r = Decimal(str(random.random() if draw is None else draw))

    base = base_multiplier(r, bet)
    adjusted = Decimal(base) * (rtp / REFERENCE_RTP)
    prize = round_half_up(bet * adjusted)

    return PrizeResult(
        multiplier=adjusted,
        prize_amount=prize,
        base_multiplier=base,
        draw=r,
    )
