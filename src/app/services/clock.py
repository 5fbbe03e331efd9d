"""Ledger Clock Interface"""

from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the ledger wall-clock time, in unix seconds"""

    @abstractmethod
    def unix_timestamp(self) -> int:
        pass
