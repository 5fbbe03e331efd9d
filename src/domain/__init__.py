from .base import BaseModel
from .account import Account, Rent, SYSTEM_PROGRAM_ID, LAMPORTS_PER_SOL
from .invoice import Invoice, InvoiceStatus
from .invoice_layout import INVOICE_SPACE, encode_invoice, decode_invoice
from .address import derive_invoice_address
from .errors import LedgerErrorCode, ledger_error

__all__ = [
    "BaseModel",
    "Account",
    "Rent",
    "SYSTEM_PROGRAM_ID",
    "LAMPORTS_PER_SOL",
    "Invoice",
    "InvoiceStatus",
    "INVOICE_SPACE",
    "encode_invoice",
    "decode_invoice",
    "derive_invoice_address",
    "LedgerErrorCode",
    "ledger_error",
]
