"""Exception hierarchy for share decoding, interpolation and subset search."""

from __future__ import annotations


class RecoveryError(Exception):
    """Base class for every failure raised while recovering a secret."""


class ShareDecodeError(RecoveryError, ValueError):
    """A single share could not be turned into an (x, y) point."""


class InvalidDigitError(ShareDecodeError):
    """A value string is empty or contains a non-alphanumeric character."""


class DigitOutOfRangeError(ShareDecodeError):
    """A digit's numeric value is not below the declared base."""


class ShareFormatError(ShareDecodeError):
    """A share entry or the threshold metadata is structurally invalid."""


class DegenerateInputError(RecoveryError, ValueError):
    """Two points share an x-coordinate, so interpolation would divide by zero."""


class InexactDivisionError(RecoveryError, ArithmeticError):
    """Exact-mode division left a remainder."""


class InsufficientSharesError(RecoveryError):
    """Fewer shares are available than the threshold requires."""

    def __init__(self, available: int, threshold: int) -> None:
        super().__init__(f"Need at least {threshold} shares, got {available}")
        self.available = available
        self.threshold = threshold


class NoConsistentSubsetError(RecoveryError):
    """Every candidate subset failed validation against the share set."""

    def __init__(self, candidates_evaluated: int, threshold: int, tolerance: int) -> None:
        super().__init__(
            f"No {threshold}-subset is consistent with the share set "
            f"(evaluated {candidates_evaluated} candidates, tolerance {tolerance})"
        )
        self.candidates_evaluated = candidates_evaluated
        self.threshold = threshold
        self.tolerance = tolerance
