# scratch/exceptions.py
from wallets.exceptions import (  # noqa: F401
    InsufficientFunds,
    LedgerError,
    NotFound,
    StorageFailure,
)

from .defaults import ALLOWED_BETS


class InvalidBet(LedgerError):
    status_code = 400

    def __init__(self, message="Invalid bet amount. Choose one of the allowed values.", allowed_bets=ALLOWED_BETS):
        super().__init__(message)
        self.allowed_bets = list(allowed_bets)


class ImmutableRoundError(Exception):
    """Game rounds are an audit trail: never updated, never deleted."""
