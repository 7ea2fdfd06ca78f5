from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Server-side source of "now". Client timestamps are never trusted."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant as naive UTC"""
        pass
