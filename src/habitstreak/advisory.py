"""One-time operator advisory for missing composite indexes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import MissingIndexError
from .logging_config import get_logger

logger = get_logger("advisory")


@dataclass
class IndexAdvisory:
    """Remembers whether the missing-index warning has been raised.

    One instance is owned by the application context; tests create their own
    or call :meth:`reset` between cases.
    """

    warned: bool = False
    message: Optional[str] = None

    def notify(self, error: MissingIndexError) -> bool:
        """Emit the warning on first use; return True only when it was emitted."""

        if self.warned:
            return False
        self.warned = True
        self.message = (
            f"Database index required: {error.index_name} on {error.table}. "
            "Habit history is served through a slower fallback query until "
            "`habitstreak create-indexes` has been run."
        )
        logger.warning(self.message, extra={"index": error.index_name, "table": error.table})
        return True

    def reset(self) -> None:
        self.warned = False
        self.message = None
