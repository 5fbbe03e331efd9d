"""FundAccount Use Case

Credits lamports to a wallet from the faucet (devnet-style airdrop) so that
creators can fund invoice rent and payers can settle invoices.
"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account, LAMPORTS_PER_SOL
from src.domain.address import InvalidPublicKeyError, decode_pubkey
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.invoice import U64_MAX
from .dtos import BalanceResponseDTO, FundAccountCommandDTO

logger = logging.getLogger(__name__)


class FundAccount:
    """
    Use Case: Airdrop lamports into an account

    Business Rules:
    1. Faucet can be disabled by configuration
    2. A single airdrop is capped at max_lamports (None = unlimited)
    3. Missing accounts are created as system accounts
    4. Balance may not overflow u64
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        enabled: bool = True,
        max_lamports: Optional[int] = None,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.enabled = enabled
        self.max_lamports = max_lamports

    async def execute(self, command: FundAccountCommandDTO) -> Result[BalanceResponseDTO]:
        try:
            if not self.enabled:
                return Return.err(ledger_error(LedgerErrorCode.FAUCET_DISABLED))

            if self.max_lamports is not None and command.lamports > self.max_lamports:
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.FAUCET_LIMIT_EXCEEDED,
                        reason=f"requested={command.lamports}, max={self.max_lamports}",
                    )
                )

            try:
                decode_pubkey(command.address)
            except InvalidPublicKeyError as e:
                return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

            account = await self.account_repo.get_by_address(command.address, for_update=True)
            if account is None:
                account = await self.account_repo.create(Account(address=command.address))

            if account.lamports + command.lamports > U64_MAX:
                error = ledger_error(
                    LedgerErrorCode.ARITHMETIC_OVERFLOW,
                    reason=f"balance={account.lamports}, credit={command.lamports}",
                )
                await self.uow.rollback()
                return Return.err(error)

            account.lamports += command.lamports
            account = await self.account_repo.update(account)

            await self.uow.commit()

            logger.info(f"Airdropped {command.lamports} lamports to {command.address}")

            return Return.ok(
                BalanceResponseDTO(
                    address=account.address,
                    lamports=account.lamports,
                    sol=Decimal(account.lamports) / Decimal(LAMPORTS_PER_SOL),
                    last_updated=account.updated_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="FUND_ACCOUNT_FAILED",
                    message="Failed to fund account",
                    reason=str(e),
                )
            )
