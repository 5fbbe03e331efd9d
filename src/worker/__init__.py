"""Background workers for the invoice ledger"""
from .invoice_auditor import InvoiceAuditorWorker

__all__ = ["InvoiceAuditorWorker"]
