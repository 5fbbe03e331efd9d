"""Value Transfer Interface

Defines the atomic debit-credit primitive that moves lamports between
accounts. Implementations must run inside the caller's unit of work so a
failed operation rolls the transfer back.
"""

from abc import ABC, abstractmethod
from pydantic import BaseModel
from libs.result import Result


class TransferReceipt(BaseModel):
    """Balances observed after a successful transfer"""

    source: str
    destination: str
    lamports: int
    source_balance_after: int
    destination_balance_after: int


class ValueTransfer(ABC):
    """Atomic transfer of lamports from a source to a destination account"""

    @abstractmethod
    async def transfer(self, source: str, destination: str, lamports: int) -> Result[TransferReceipt]:
        """
        Move lamports from source to destination

        Args:
            source: Base58 address debited (must hold >= lamports)
            destination: Base58 address credited (created if missing)
            lamports: Amount to move

        Returns:
            Result[TransferReceipt]: Receipt, or InsufficientFunds /
            ArithmeticOverflow error
        """
        pass
