"""List Invoices Use Case

Lists invoice accounts owned by the ledger program with optional filters.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.domain.invoice import InvoiceStatus
from src.domain.invoice_layout import InvoiceLayoutError, decode_invoice
from .dtos import ListInvoicesResponseDTO, to_invoice_response

logger = logging.getLogger(__name__)


class ListInvoices:
    """
    List Invoices Use Case

    Scans program-owned accounts (newest first), decodes each record and
    applies creator/status filters before paginating. Accounts that fail to
    decode are skipped with a warning.
    """

    def __init__(self, account_repo: AccountRepository, program_id: str):
        self.account_repo = account_repo
        self.program_id = program_id

    async def execute(
        self,
        creator: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListInvoicesResponseDTO]:
        try:
            accounts = await self.account_repo.get_by_owner(self.program_id)

            invoices = []
            for account in accounts:
                try:
                    invoice = decode_invoice(account.data)
                except InvoiceLayoutError as e:
                    logger.warning(f"Skipping undecodable account {account.address}: {e}")
                    continue

                if creator and invoice.creator != creator:
                    continue
                if status and invoice.status != status:
                    continue
                invoices.append(to_invoice_response(account.address, account.lamports, invoice))

            return Return.ok(
                ListInvoicesResponseDTO(
                    invoices=invoices[offset:offset + limit],
                    total=len(invoices),
                    limit=limit,
                    offset=offset,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to list invoices",
                    reason=str(e),
                )
            )
