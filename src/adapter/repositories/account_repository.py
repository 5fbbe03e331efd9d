"""SQLAlchemy implementation of AccountRepository

Provides persistence for Account rows with pessimistic locking support so
concurrent operations on the same address serialize.
"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account, utc_now


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Writes are flushed, never committed (the unit of work commits)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_address(self, address: str, for_update: bool = False) -> Optional[Account]:
        stmt = select(Account).where(Account.address == address)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, account: Account) -> Account:
        """
        Flush changes to an existing account and bump updated_at

        Note:
            Should be called within a transaction with the account already locked
        """
        account.updated_at = utc_now()
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def get_by_owner(
        self,
        owner: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Account]:
        statement = (
            select(Account)
            .where(Account.owner == owner)
            .order_by(Account.created_at.desc(), Account.address)
        )

        if limit is not None:
            statement = statement.limit(limit)
        if offset:
            statement = statement.offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())
