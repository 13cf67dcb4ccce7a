# wallets/exceptions.py


class LedgerError(Exception):
    """Base class for every ledger / round failure surfaced to callers."""

    status_code = 400


class NotFound(LedgerError):
    status_code = 404


class InsufficientFunds(LedgerError):
    status_code = 400


class StorageFailure(LedgerError):
    """Transaction, lock or commit failure. Nothing was committed; safe to retry."""

    status_code = 500


class WithdrawalError(LedgerError):
    pass


class InvalidAmount(LedgerError):
    pass


class TransactionStateError(LedgerError):
    """The wallet transaction is not in a state that allows the requested change."""
