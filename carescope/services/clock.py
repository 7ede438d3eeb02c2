"""
CareScope Clock Service
Wall-clock source injected into the engines so one operation reads "now" once
"""

import logging
from typing import Optional
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)


class Clock:
    """Wall-clock time"""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """Clock pinned to a given instant, for tests and back-dated entry"""

    def __init__(self, fixed: datetime):
        self.fixed = fixed

    def now(self) -> datetime:
        return self.fixed

    def advance(self, **kwargs) -> None:
        """Move the pinned instant forward by timedelta keyword arguments"""
        self.fixed = self.fixed + timedelta(**kwargs)
        logger.debug(f"FixedClock advanced to {self.fixed.isoformat()}")


# =============================================================================
# Singleton Instance
# =============================================================================

_clock: Optional[Clock] = None


def get_clock() -> Clock:
    """Get or create the process clock"""
    global _clock
    if _clock is None:
        _clock = Clock()
    return _clock
