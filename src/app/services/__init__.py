from .unit_of_work import UnitOfWork
from .clock import Clock
from .value_transfer import ValueTransfer, TransferReceipt

__all__ = [
    "UnitOfWork",
    "Clock",
    "ValueTransfer",
    "TransferReceipt",
]
