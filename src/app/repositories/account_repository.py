"""Account Repository Interface

Defines the contract for the keyed account store.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.account import Account


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Methods that read an account before mutating it take `for_update` so the
    row stays locked until the unit of work commits or rolls back.
    """

    @abstractmethod
    async def get_by_address(self, address: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by address

        Args:
            address: Base58 account key
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Account if it exists, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """
        Create a new account

        Args:
            account: Account entity to persist

        Returns:
            Created Account
        """
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """
        Persist changes to an existing account

        Args:
            account: Account entity with updated values

        Returns:
            Updated Account
        """
        pass

    @abstractmethod
    async def get_by_owner(
        self,
        owner: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Account]:
        """
        Retrieve accounts owned by a program, newest first

        Args:
            owner: Base58 program id
            limit: Maximum number of accounts to return (None = all)
            offset: Offset for pagination

        Returns:
            List of accounts
        """
        pass
