"""Unit tests for AuditInvoices use case

Tests cover:
- Consistent accounts produce no violations
- Layout, derivation, lifecycle and rent violations
- Audit is read-only
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.audit_invoices import AuditInvoices
from src.domain.account import Account
from src.domain.address import derive_invoice_address
from src.domain.invoice import InvoiceStatus
from tests.conftest import make_key


@pytest.fixture
def mock_account_repo():
    repo = MagicMock()
    repo.update = AsyncMock()
    return repo


@pytest.fixture
def audit_use_case(mock_account_repo, program_id):
    return AuditInvoices(account_repo=mock_account_repo, program_id=program_id)


@pytest.mark.asyncio
class TestAuditInvoices:

    async def test_consistent_accounts(
        self, audit_use_case, mock_account_repo, make_invoice_account, invoice_address, creator
    ):
        """
        Given: One pending and one consistent paid invoice
        When: audit runs
        Then: No violations
        """
        paid_creator = make_key(7)
        paid_address, _ = derive_invoice_address(paid_creator, audit_use_case.program_id)
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[
                make_invoice_account(invoice_address, creator),
                make_invoice_account(
                    paid_address, paid_creator, status=InvoiceStatus.PAID, paid_at=1_700_000_000
                ),
            ]
        )

        result = await audit_use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 2
        assert result.value.violations_found == 0
        assert result.value.violations == []
        mock_account_repo.update.assert_not_called()

    async def test_pending_with_paid_at(
        self, audit_use_case, mock_account_repo, make_invoice_account, invoice_address, creator
    ):
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[make_invoice_account(invoice_address, creator, paid_at=5)]
        )

        result = await audit_use_case.execute()

        assert result.value.violations_found == 1
        violation = result.value.violations[0]
        assert violation.address == invoice_address
        assert violation.creator == creator
        assert violation.violation == "pending invoice has paid_at=5"

    async def test_paid_before_created(
        self, audit_use_case, mock_account_repo, make_invoice_account, invoice_address, creator
    ):
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[
                make_invoice_account(
                    invoice_address, creator, status=InvoiceStatus.PAID,
                    created_at=1_700_000_000, paid_at=1_600_000_000,
                )
            ]
        )

        result = await audit_use_case.execute()

        assert result.value.violations_found == 1
        assert "precedes created_at" in result.value.violations[0].violation

    async def test_address_not_derived_from_creator(
        self, audit_use_case, mock_account_repo, make_invoice_account, creator
    ):
        stray_address = make_key(99)
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[make_invoice_account(stray_address, creator)]
        )

        result = await audit_use_case.execute()

        assert result.value.violations_found == 1
        assert result.value.violations[0].address == stray_address
        assert "does not derive from creator" in result.value.violations[0].violation

    async def test_balance_below_rent(
        self, audit_use_case, mock_account_repo, make_invoice_account, invoice_address,
        creator, rent_minimum
    ):
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[
                make_invoice_account(invoice_address, creator, lamports=rent_minimum - 1)
            ]
        )

        result = await audit_use_case.execute()

        assert result.value.violations_found == 1
        assert "below rent-exempt minimum" in result.value.violations[0].violation

    async def test_undecodable_account(
        self, audit_use_case, mock_account_repo, program_id
    ):
        address = make_key(50)
        mock_account_repo.get_by_owner = AsyncMock(
            return_value=[Account(address=address, owner=program_id, data=b"\x00" * 10)]
        )

        result = await audit_use_case.execute()

        codes = [v.violation for v in result.value.violations]
        assert result.value.violations_found == 2
        assert codes[0] == "data length 10 != 469"
        assert codes[1].startswith("undecodable:")
        assert all(v.creator is None for v in result.value.violations)

    async def test_repository_failure(self, audit_use_case, mock_account_repo):
        mock_account_repo.get_by_owner = AsyncMock(side_effect=Exception("Database error"))

        result = await audit_use_case.execute()

        assert result.is_err()
        assert result.error.code == "AUDIT_FAILED"
