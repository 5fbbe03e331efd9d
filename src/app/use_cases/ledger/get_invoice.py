"""Get Invoice Use Case

Reads and decodes an invoice account, by address or by creator.
"""

from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.domain.address import InvalidPublicKeyError, decode_pubkey, derive_invoice_address
from src.domain.errors import LedgerErrorCode, ledger_error
from .dtos import InvoiceResponseDTO, to_invoice_response
from .invoice_accounts import load_invoice


class GetInvoice:
    """
    Get Invoice Use Case

    Read-only operation returning the decoded invoice at an address.

    Errors:
        InvalidPublicKey: address or creator is not a 32-byte base58 key
        AccountNotInitialized: no invoice account at the address
        AccountDidNotDeserialize: account data is not an invoice
    """

    def __init__(self, account_repo: AccountRepository, program_id: str):
        self.account_repo = account_repo
        self.program_id = program_id

    async def execute(self, address: str) -> Result[InvoiceResponseDTO]:
        try:
            decode_pubkey(address)
        except InvalidPublicKeyError as e:
            return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

        account = await self.account_repo.get_by_address(address)
        loaded = load_invoice(account, address, self.program_id)
        if loaded.is_err():
            return Return.err(loaded.error)

        return Return.ok(to_invoice_response(address, account.lamports, loaded.value))

    async def execute_for_creator(self, creator: str) -> Result[InvoiceResponseDTO]:
        """Look up the invoice held in a creator's derived slot"""
        try:
            address, _ = derive_invoice_address(creator, self.program_id)
        except InvalidPublicKeyError as e:
            return Return.err(ledger_error(LedgerErrorCode.INVALID_PUBLIC_KEY, reason=str(e)))

        return await self.execute(address)
