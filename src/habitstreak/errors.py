"""Error taxonomy shared by the store layer and the tracker facade."""

from __future__ import annotations


class HabitStreakError(Exception):
    """Base class for all HabitStreak errors."""


class ConnectivityError(HabitStreakError):
    """The habit store could not be reached or refused the operation."""


class MissingIndexError(HabitStreakError):
    """A compound query needs a composite index the store does not have."""

    def __init__(self, index_name: str, table: str):
        self.index_name = index_name
        self.table = table
        super().__init__(
            f"The query requires an index: {index_name} on {table}. "
            "Run `habitstreak create-indexes` to create it."
        )


# Name used by callers that reason about store capabilities in general.
MissingCapabilityError = MissingIndexError


class ValidationError(HabitStreakError, ValueError):
    """User input rejected before it reaches a repository."""


__all__ = [
    "ConnectivityError",
    "HabitStreakError",
    "MissingCapabilityError",
    "MissingIndexError",
    "ValidationError",
]
