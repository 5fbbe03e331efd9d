"""System-program style value transfer over the account store

Debits and credits account rows through the same repository (and therefore
the same session transaction) as the calling use case.
"""

import logging
from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.services.value_transfer import TransferReceipt, ValueTransfer
from src.domain.account import Account
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.invoice import U64_MAX

logger = logging.getLogger(__name__)


class SystemProgramTransfer(ValueTransfer):
    """
    Transfer lamports between account rows

    Rules:
    - Source must be a system-owned account without data
    - Source balance must cover the amount (a missing source holds 0)
    - Destination is created as a system account if missing
    - Destination balance may not overflow u64
    - Rows are locked with SELECT FOR UPDATE before mutation
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def transfer(self, source: str, destination: str, lamports: int) -> Result[TransferReceipt]:
        source_account = await self.account_repo.get_by_address(source, for_update=True)
        if source_account is not None and source_account.is_materialized():
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INVALID_ACCOUNT_OWNER,
                    reason=f"Transfer: from must not carry data (owner {source_account.owner})",
                )
            )

        source_balance = source_account.lamports if source_account else 0

        if source_balance < lamports:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.INSUFFICIENT_FUNDS,
                    reason=f"Transfer: insufficient lamports {source_balance}, need {lamports}",
                )
            )

        if lamports == 0:
            destination_account = await self.account_repo.get_by_address(destination)
            return Return.ok(
                TransferReceipt(
                    source=source,
                    destination=destination,
                    lamports=0,
                    source_balance_after=source_balance,
                    destination_balance_after=destination_account.lamports if destination_account else 0,
                )
            )

        if source == destination:
            return Return.ok(
                TransferReceipt(
                    source=source,
                    destination=destination,
                    lamports=lamports,
                    source_balance_after=source_balance,
                    destination_balance_after=source_balance,
                )
            )

        destination_account = await self.account_repo.get_by_address(destination, for_update=True)
        if destination_account is None:
            destination_account = await self.account_repo.create(Account(address=destination))

        if destination_account.lamports + lamports > U64_MAX:
            return Return.err(
                ledger_error(
                    LedgerErrorCode.ARITHMETIC_OVERFLOW,
                    reason=f"destination balance {destination_account.lamports} + {lamports} exceeds u64",
                )
            )

        source_account.lamports -= lamports
        source_account = await self.account_repo.update(source_account)

        destination_account.lamports += lamports
        destination_account = await self.account_repo.update(destination_account)

        logger.debug(f"Transferred {lamports} lamports from {source} to {destination}")

        return Return.ok(
            TransferReceipt(
                source=source,
                destination=destination,
                lamports=lamports,
                source_balance_after=source_account.lamports,
                destination_balance_after=destination_account.lamports,
            )
        )
