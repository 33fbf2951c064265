"""Engine error taxonomy.

Every ``GauntletError`` is recoverable: the rejected operation leaves the
ledger and game untouched, and the caller can surface ``str(exc)`` to the
user. ``InvariantViolation`` is different: it signals a defect in the
engine itself and must never be caught and retried.
"""

from __future__ import annotations


class GauntletError(Exception):
    """Base class for recoverable engine errors."""


class InvalidStake(GauntletError):
    """Stake amount is not positive, or odds are below 1."""


class InsufficientFunds(GauntletError):
    """Stake exceeds the available balance."""


class InvalidContestant(GauntletError):
    """Contestant id is unknown or already eliminated."""


class GameAlreadyComplete(GauntletError):
    """Operation requires a game (or ledger) that has not finished yet."""


class GameNotComplete(GauntletError):
    """Operation requires a finished game."""


class BetNotFound(GauntletError):
    """No active bet with the given id."""


class RefundNotAllowed(GauntletError):
    """Refunds are only possible before the first round or after an abort."""


class InvariantViolation(AssertionError):
    """An internal invariant was broken (negative balance, double payout...)."""
