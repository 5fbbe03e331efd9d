"""ProcessPayment Use Case

Settles a pending invoice: moves the payment from payer to creator and marks
the invoice paid, both inside one unit of work.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.services.value_transfer import ValueTransfer
from src.app.repositories.account_repository import AccountRepository
from src.domain.address import InvalidPublicKeyError, decode_pubkey, derive_invoice_address
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.invoice_layout import encode_invoice
from .dtos import PaymentResponseDTO, ProcessPaymentCommandDTO, to_invoice_response
from .invoice_accounts import load_invoice

logger = logging.getLogger(__name__)


class ProcessPayment:
    """
    Use Case: Pay an invoice

    Business Rules (checked in order, each fatal):
    1. Invoice account exists and decodes (AccountNotInitialized,
       AccountDidNotDeserialize; AddressMismatch when the address is not
       the creator's derived slot)
    2. Stored invoice creator equals the supplied creator (InvalidCreator)
    3. Invoice address is the one derived from the creator key (AddressMismatch)
    4. Invoice is pending (InvoiceNotPending)
    5. amount >= invoice.amount (InsufficientPaymentAmount)
    6. Payer signed (MissingSignature)

    A supplied creator that differs from the stored one is reported as
    InvalidCreator even though its derived address differs too.

    Overpayment is transferred in full. Transfer failure aborts the operation
    with no state change.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        value_transfer: ValueTransfer,
        clock: Clock,
        program_id: str,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.value_transfer = value_transfer
        self.clock = clock
        self.program_id = program_id

    async def execute(self, command: ProcessPaymentCommandDTO) -> Result[PaymentResponseDTO]:
        """
        Execute invoice payment

        Args:
            command: ProcessPaymentCommandDTO with invoice address, creator, payer, amount

        Returns:
            Result[PaymentResponseDTO]: Success with the paid invoice or error
        """
        try:
            try:
                expected_address, _ = derive_invoice_address(command.creator, self.program_id)
                decode_pubkey(command.payer)
                decode_pubkey(command.invoice_address)
            except InvalidPublicKeyError as e:
                return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

            address_matches = command.invoice_address == expected_address
            address_mismatch = ledger_error(
                LedgerErrorCode.ADDRESS_MISMATCH,
                reason=f"expected={expected_address}, provided={command.invoice_address}",
            )

            # Step 1: Lock and load the invoice account
            account = await self.account_repo.get_by_address(command.invoice_address, for_update=True)
            loaded = load_invoice(account, command.invoice_address, self.program_id)
            if loaded.is_err():
                await self.uow.rollback()
                if not address_matches:
                    return Return.err(address_mismatch)
                return Return.err(loaded.error)

            invoice = loaded.value

            # Step 2: Creator must match the invoice record
            if invoice.creator != command.creator:
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.INVALID_CREATOR,
                        reason=f"invoice.creator={invoice.creator}, provided={command.creator}",
                    )
                )

            if not address_matches:
                await self.uow.rollback()
                return Return.err(address_mismatch)

            # Step 3: Only pending invoices can be paid
            if not invoice.is_pending():
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.INVOICE_NOT_PENDING,
                        reason=f"status={invoice.status.value}, paid_at={invoice.paid_at}",
                    )
                )

            # Step 4: Payment must cover the invoice
            if command.amount < invoice.amount:
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.INSUFFICIENT_PAYMENT_AMOUNT,
                        reason=f"amount={command.amount}, required={invoice.amount}",
                    )
                )

            # Step 5: Payer must sign
            if command.payer not in command.signers:
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        LedgerErrorCode.MISSING_SIGNATURE,
                        reason=f"Payer {command.payer} did not sign",
                    )
                )

            # Step 6: Move funds before touching the invoice state
            transfer_result = await self.value_transfer.transfer(
                command.payer, command.creator, command.amount
            )
            if transfer_result.is_err():
                await self.uow.rollback()
                return Return.err(transfer_result.error)
            receipt = transfer_result.value

            # Step 7: pending -> paid
            invoice.mark_paid(self.clock.unix_timestamp())
            account.data = encode_invoice(invoice)
            account = await self.account_repo.update(account)

            log_message = f"Payment processed for {command.amount} lamports"
            logger.info(log_message)

            # Step 8: Commit transaction
            await self.uow.commit()

            return Return.ok(
                PaymentResponseDTO(
                    invoice=to_invoice_response(command.invoice_address, account.lamports, invoice),
                    payer=command.payer,
                    amount=command.amount,
                    payer_balance_after=receipt.source_balance_after,
                    creator_balance_after=receipt.destination_balance_after,
                    logs=[log_message],
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PROCESS_PAYMENT_FAILED",
                    message="Failed to process payment",
                    reason=str(e),
                )
            )
