"""Unit tests for GetBalance use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.get_balance import GetBalance
from src.domain.account import Account


@pytest.fixture
def mock_account_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestGetBalance:

    async def test_existing_account(self, mock_account_repo, payer):
        account = Account(address=payer, lamports=1_500_000_000)
        mock_account_repo.get_by_address = AsyncMock(return_value=account)

        result = await GetBalance(mock_account_repo).execute(payer)

        assert result.is_ok()
        assert result.value.lamports == 1_500_000_000
        assert result.value.sol == Decimal("1.5")
        assert result.value.last_updated == account.updated_at

    async def test_unknown_account_has_zero_balance(self, mock_account_repo, payer):
        mock_account_repo.get_by_address = AsyncMock(return_value=None)

        result = await GetBalance(mock_account_repo).execute(payer)

        assert result.is_ok()
        assert result.value.lamports == 0
        assert result.value.sol == Decimal(0)
        assert result.value.last_updated is None

    async def test_invalid_address(self, mock_account_repo):
        mock_account_repo.get_by_address = AsyncMock()

        result = await GetBalance(mock_account_repo).execute("0OIl")

        assert result.is_err()
        assert result.error.code == "InvalidPublicKey"
        mock_account_repo.get_by_address.assert_not_called()
