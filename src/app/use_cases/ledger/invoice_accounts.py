"""Helpers for reading invoice records out of program-owned accounts"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.errors import LedgerErrorCode, ledger_error
from src.domain.invoice import Invoice
from src.domain.invoice_layout import InvoiceLayoutError, decode_invoice


def load_invoice(account: Optional[Account], address: str, program_id: str) -> Result[Invoice]:
    """
    Decode the invoice stored in an account

    Returns:
        Result[Invoice]: AccountNotInitialized when the account is missing or
        not owned by the program, AccountDidNotDeserialize when its data is
        not a valid invoice record
    """
    if account is None or not account.data:
        return Return.err(
            ledger_error(
                LedgerErrorCode.ACCOUNT_NOT_INITIALIZED,
                reason=f"No invoice account at {address}",
            )
        )

    if account.owner != program_id:
        return Return.err(
            ledger_error(
                LedgerErrorCode.ACCOUNT_NOT_INITIALIZED,
                reason=f"Account {address} is owned by {account.owner}, not {program_id}",
            )
        )

    try:
        invoice = decode_invoice(account.data)
    except InvoiceLayoutError as e:
        return Return.err(
            ledger_error(LedgerErrorCode.ACCOUNT_DID_NOT_DESERIALIZE, reason=str(e))
        )

    return Return.ok(invoice)
