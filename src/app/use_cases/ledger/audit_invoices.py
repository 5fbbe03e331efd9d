"""AuditInvoices Use Case

Checks every invoice account against the ledger invariants.
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Rent
from src.domain.address import InvalidPublicKeyError, derive_invoice_address
from src.domain.invoice_layout import INVOICE_SPACE, InvoiceLayoutError, decode_invoice
from .dtos import AuditResultDTO, InvoiceViolationDTO

logger = logging.getLogger(__name__)


class AuditInvoices:
    """
    Use Case: Audit invoice accounts

    Business Rules:
    1. Every account owned by the program is checked
    2. Data must be exactly INVOICE_SPACE bytes and decode as an invoice
    3. Account address must be the one derived from the stored creator
    4. Pending invoices have paid_at = 0
    5. Paid invoices have paid_at >= created_at > 0
    6. Balance must cover the rent-exempt minimum
    7. Does NOT modify any data (read-only audit)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        program_id: str,
        rent: Optional[Rent] = None,
    ):
        self.account_repo = account_repo
        self.program_id = program_id
        self.rent = rent or Rent()

    async def execute(self) -> Result[AuditResultDTO]:
        """
        Execute invoice audit

        Returns:
            Result[AuditResultDTO]: Audit result with any violations
        """
        start_time = time.time()
        audit_time = datetime.now(timezone.utc)

        try:
            logger.info("Starting invoice account audit")

            accounts = await self.account_repo.get_by_owner(self.program_id)
            rent_minimum = self.rent.minimum_balance(INVOICE_SPACE)

            violations: List[InvoiceViolationDTO] = []

            for account in accounts:
                record = self._recorder(violations, account.address)

                if len(account.data) != INVOICE_SPACE:
                    record(f"data length {len(account.data)} != {INVOICE_SPACE}")

                try:
                    invoice = decode_invoice(account.data)
                except InvoiceLayoutError as e:
                    record(f"undecodable: {e}")
                    continue

                try:
                    expected_address, _ = derive_invoice_address(invoice.creator, self.program_id)
                except InvalidPublicKeyError as e:
                    record(f"invalid creator key: {e}", invoice.creator)
                    continue

                if expected_address != account.address:
                    record(f"address does not derive from creator (expected {expected_address})", invoice.creator)

                for violation in invoice.invariant_violations():
                    record(violation, invoice.creator)

                if account.lamports < rent_minimum:
                    record(f"balance {account.lamports} below rent-exempt minimum {rent_minimum}", invoice.creator)

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = AuditResultDTO(
                total_accounts_checked=len(accounts),
                violations_found=len(violations),
                violations=violations,
                audit_time=audit_time,
                execution_time_ms=execution_time_ms,
            )

            if violations:
                logger.warning(
                    f"Audit complete. Found {len(violations)} violations "
                    f"across {len(accounts)} invoice accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Audit complete. All {len(accounts)} invoice accounts consistent "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Invoice audit failed: {e}")
            return Return.err(
                Error(
                    code="AUDIT_FAILED",
                    message="Failed to audit invoice accounts",
                    reason=str(e),
                )
            )

    @staticmethod
    def _recorder(violations: List[InvoiceViolationDTO], address: str):
        """Return a callback that appends violations for one account"""
        def record(violation: str, creator: Optional[str] = None) -> None:
            violations.append(
                InvoiceViolationDTO(address=address, creator=creator, violation=violation)
            )
            logger.warning(f"Invoice account {address}: {violation}")
        return record
