"""Get Balance Use Case

Retrieves an account's lamport balance.
"""

from decimal import Decimal
from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import LAMPORTS_PER_SOL
from src.domain.address import InvalidPublicKeyError, decode_pubkey
from src.domain.errors import LedgerErrorCode, ledger_error
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only. An address with no account row holds zero lamports.
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, address: str) -> Result[BalanceResponseDTO]:
        try:
            decode_pubkey(address)
        except InvalidPublicKeyError as e:
            return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

        account = await self.account_repo.get_by_address(address)
        lamports = account.lamports if account else 0

        return Return.ok(
            BalanceResponseDTO(
                address=address,
                lamports=lamports,
                sol=Decimal(lamports) / Decimal(LAMPORTS_PER_SOL),
                last_updated=account.updated_at if account else None,
            )
        )
