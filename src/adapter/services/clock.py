import time
from src.app.services.clock import Clock


class SystemClock(Clock):
    """Ledger clock backed by the host wall clock"""

    def unix_timestamp(self) -> int:
        return int(time.time())


class FixedClock(Clock):
    """Clock pinned to a given timestamp (replays and tests)"""

    def __init__(self, timestamp: int):
        self.timestamp = timestamp

    def unix_timestamp(self) -> int:
        return self.timestamp
