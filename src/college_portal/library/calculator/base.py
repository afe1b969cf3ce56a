from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..model import IssuedBook


class FineCalculator(ABC):
    """Fine rule for late returns (Strategy Pattern)."""

    @abstractmethod
    def fine_for(self, issue: IssuedBook, now: datetime) -> float:
        raise NotImplementedError
