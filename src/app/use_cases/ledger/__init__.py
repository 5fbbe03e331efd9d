"""Invoice ledger use cases"""
from .create_invoice import CreateInvoice
from .process_payment import ProcessPayment
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .get_balance import GetBalance
from .fund_account import FundAccount
from .audit_invoices import AuditInvoices
from .dtos import (
    CreateInvoiceCommandDTO,
    ProcessPaymentCommandDTO,
    FundAccountCommandDTO,
    InvoiceResponseDTO,
    CreateInvoiceResponseDTO,
    PaymentResponseDTO,
    ListInvoicesResponseDTO,
    BalanceResponseDTO,
    InvoiceViolationDTO,
    AuditResultDTO,
)

__all__ = [
    "CreateInvoice",
    "ProcessPayment",
    "GetInvoice",
    "ListInvoices",
    "GetBalance",
    "FundAccount",
    "AuditInvoices",
    "CreateInvoiceCommandDTO",
    "ProcessPaymentCommandDTO",
    "FundAccountCommandDTO",
    "InvoiceResponseDTO",
    "CreateInvoiceResponseDTO",
    "PaymentResponseDTO",
    "ListInvoicesResponseDTO",
    "BalanceResponseDTO",
    "InvoiceViolationDTO",
    "AuditResultDTO",
]
