# scratch/services.py
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sa_conf.services import get_setting as default_get_setting
from wallets.services import get_wallet, ledger_handle

from .defaults import ALLOWED_BETS, DEFAULT_RTP, GAME_TYPE, RTP_SETTING_KEY
from .engine import compute_prize
from .exceptions import InsufficientFunds, InvalidBet
from .models import GameRound

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MULTIPLIER_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class RoundResult:
    round_id: str
    bet_amount: Decimal
    prize: Decimal
    multiplier: Decimal
    final_balance: Decimal

    def as_dict(self):
        return {
            "success": True,
            "prize": self.prize,
            "finalBalance": self.final_balance,
            "multiplier": self.multiplier,
            "betAmount": self.bet_amount,
            "roundId": self.round_id,
        }


def normalize_bet(bet_amount) -> Decimal:
    """Bets are compared to the allowed set to the cent."""
    try:
        bet = Decimal(str(bet_amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidBet()
    if bet not in ALLOWED_BETS:
        raise InvalidBet()
    return bet


def read_rtp(get_setting=default_get_setting) -> Decimal:
    raw = get_setting(RTP_SETTING_KEY)
    if raw is None:
        return DEFAULT_RTP

    try:
        rtp = Decimal(str(raw).strip())
    except InvalidOperation:
        rtp = None

    if rtp is None or not rtp.is_finite():
        logger.warning("Unparsable %s setting %r, using %s", RTP_SETTING_KEY, raw, DEFAULT_RTP)
        return DEFAULT_RTP
    return rtp


def play_round(user_id, bet_amount, *, get_setting=default_get_setting, draw=None) -> RoundResult:
    """
    Settle one scratch card round for a player.

    Validation runs first and writes nothing. The debit, the prize credit,
    the rollover reduction and the round record then commit together under
    the wallet row lock, or not at all.
    """
    bet = normalize_bet(bet_amount)

    wallet = get_wallet(user_id)
    if wallet.balance < bet:
        raise InsufficientFunds("Insufficient balance")

    with ledger_handle(user_id) as wallet:
        # Another round may have spent the balance since the unlocked check
        if wallet.balance < bet:
            raise InsufficientFunds("Insufficient balance")

        rtp = read_rtp(get_setting)
        result = compute_prize(bet, rtp, draw)

        wallet.balance = wallet.balance - bet + result.prize_amount
        wallet.rollover_required = max(Decimal("0.00"), wallet.rollover_required - bet)
        wallet.save(update_fields=["balance", "rollover_required", "updated_at"])

        multiplier = result.multiplier.quantize(MULTIPLIER_PLACES, rounding=ROUND_HALF_UP)
        game_round = GameRound.objects.create(
            user_id=user_id,
            game_type=GAME_TYPE,
            bet_amount=bet,
            prize_amount=result.prize_amount,
            multiplier=multiplier,
            result_data={"rtp": float(rtp), "base_multiplier": result.base_multiplier},
        )

    logger.info(
        "Round %s user=%s bet=%s prize=%s balance=%s",
        game_round.pk, user_id, bet, result.prize_amount, wallet.balance,
    )

    return RoundResult(
        round_id=str(game_round.pk),
        bet_amount=bet,
        prize=result.prize_amount,
        multiplier=multiplier,
        final_balance=wallet.balance,
    )
