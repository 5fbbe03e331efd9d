"""CreateInvoice Use Case

Allocates a creator's invoice account at its derived address and records a
pending invoice. The creator funds the account's rent-exempt deposit.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.services.value_transfer import ValueTransfer
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account, Rent
from src.domain.address import InvalidPublicKeyError, derive_invoice_address
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.invoice import (
    MAX_DESCRIPTION_BYTES,
    Invoice,
    InvoiceStatus,
    description_byte_length,
)
from src.domain.invoice_layout import INVOICE_SPACE, encode_invoice
from .dtos import CreateInvoiceCommandDTO, CreateInvoiceResponseDTO, to_invoice_response

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create a pending invoice in the creator's invoice slot

    Business Rules:
    1. One invoice slot per creator (address derived from the creator key)
    2. Description must encode to at most 400 bytes
    3. Creator must sign
    4. Slot must not already be materialized
    5. Creator pays the rent-exempt deposit for the 469-byte account
    6. Invoice starts pending with paid_at = 0

    Flow:
    1. Derive invoice address from creator key
    2. Validate description length
    3. Validate expected address (if supplied) and creator signature
    4. Lock the invoice address and check it is unused
    5. Transfer rent shortfall from creator to the invoice address
    6. Write the encoded invoice and take ownership of the account
    7. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        value_transfer: ValueTransfer,
        clock: Clock,
        program_id: str,
        rent: Optional[Rent] = None,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.value_transfer = value_transfer
        self.clock = clock
        self.program_id = program_id
        self.rent = rent or Rent()

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[CreateInvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with creator, amount, description, signers

        Returns:
            Result[CreateInvoiceResponseDTO]: Success with the new invoice or error
        """
        try:
            # Step 1: Derive the creator's invoice slot
            try:
                invoice_address, bump = derive_invoice_address(command.creator, self.program_id)
            except InvalidPublicKeyError as e:
                return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

            # Step 2: Reject oversize descriptions before any allocation
            description_bytes = description_byte_length(command.description)
            if description_bytes > MAX_DESCRIPTION_BYTES:
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.DESCRIPTION_TOO_LONG,
                        reason=f"description_bytes={description_bytes}, max={MAX_DESCRIPTION_BYTES}",
                    )
                )

            # Step 3: Address and signature checks
            if command.invoice_address is not None and command.invoice_address != invoice_address:
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.ADDRESS_MISMATCH,
                        reason=f"expected={invoice_address}, provided={command.invoice_address}",
                    )
                )

            if command.creator not in command.signers:
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.MISSING_SIGNATURE,
                        reason=f"Creator {command.creator} did not sign",
                    )
                )

            # Step 4: Lock the slot and make sure it is free
            existing = await self.account_repo.get_by_address(invoice_address, for_update=True)
            if existing is not None and existing.is_materialized():
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.ADDRESS_IN_USE,
                        reason=f"Invoice account {invoice_address} already exists",
                    )
                )

            # Step 5: Creator funds the allocation
            rent_lamports = self.rent.minimum_balance(INVOICE_SPACE)
            prefunded = existing.lamports if existing is not None else 0
            shortfall = max(0, rent_lamports - prefunded)

            if shortfall > 0:
                transfer_result = await self.value_transfer.transfer(
                    command.creator, invoice_address, shortfall
                )
                if transfer_result.is_err():
                    await self.uow.rollback()
                    return Return.err(transfer_result.error)

            # Step 6: Populate the record
            now = self.clock.unix_timestamp()
            invoice = Invoice(
                creator=command.creator,
                amount=command.amount,
                description=command.description,
                status=InvoiceStatus.PENDING,
                created_at=now,
                paid_at=0,
            )

            account = await self.account_repo.get_by_address(invoice_address, for_update=True)
            if account is None:
                account = await self.account_repo.create(Account(address=invoice_address))
            account.owner = self.program_id
            account.data = encode_invoice(invoice)
            account = await self.account_repo.update(account)

            log_message = f"Invoice created with amount {command.amount} lamports"
            logger.info(log_message)

            # Step 7: Commit transaction
            await self.uow.commit()

            return Return.ok(
                CreateInvoiceResponseDTO(
                    invoice=to_invoice_response(invoice_address, account.lamports, invoice),
                    bump=bump,
                    rent_lamports=shortfall,
                    logs=[log_message],
                )
            )

        except IntegrityError as e:
            # Another transaction allocated the slot first
            await self.uow.rollback()
            return Return.err(ledger_error(LedgerErrorCode.ADDRESS_IN_USE, reason=str(e.orig)))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
