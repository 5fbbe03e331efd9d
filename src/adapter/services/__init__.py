from .unit_of_work import SqlAlchemyUnitOfWork
from .clock import SystemClock, FixedClock
from .value_transfer import SystemProgramTransfer

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SystemClock",
    "FixedClock",
    "SystemProgramTransfer",
]
