from __future__ import annotations

import math
from datetime import datetime

from ...core.constants import FINE_PER_DAY
from ...core.enums import IssueStatus
from ..model import IssuedBook
from .base import FineCalculator


class PerDayFineCalculator(FineCalculator):
    """Flat rate per started day past the due date; nothing once returned."""

    def __init__(self, per_day: float = FINE_PER_DAY):
        self._per_day = per_day

    def fine_for(self, issue: IssuedBook, now: datetime) -> float:
        if issue.status == IssueStatus.RETURNED or now <= issue.due_date:
            return 0
        days_late = math.ceil((now - issue.due_date).total_seconds() / 86400)
        return days_late * self._per_day
