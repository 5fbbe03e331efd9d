import pytest
from unittest.mock import AsyncMock, MagicMock

from config import ApplicationConfig
from src.domain.account import Account, Rent
from src.domain.address import derive_invoice_address, encode_pubkey
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_layout import INVOICE_SPACE, encode_invoice


def make_key(seed: int) -> str:
    """Deterministic base58 key for tests"""
    return encode_pubkey(bytes([seed]) * 32)


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def program_id():
    return ApplicationConfig.PROGRAM_ID


@pytest.fixture
def creator():
    return make_key(1)


@pytest.fixture
def payer():
    return make_key(2)


@pytest.fixture
def other_creator():
    return make_key(3)


@pytest.fixture
def invoice_address(creator, program_id):
    address, _ = derive_invoice_address(creator, program_id)
    return address


@pytest.fixture
def rent_minimum():
    return Rent().minimum_balance(INVOICE_SPACE)


@pytest.fixture
def make_invoice_account(program_id, rent_minimum):
    """Factory for program-owned accounts holding an encoded invoice"""

    def _make(
        address: str,
        creator: str,
        amount: int = 1_000,
        description: str = "rent",
        status: InvoiceStatus = InvoiceStatus.PENDING,
        created_at: int = 1_700_000_000,
        paid_at: int = 0,
        lamports: int = None,
    ) -> Account:
        invoice = Invoice(
            creator=creator,
            amount=amount,
            description=description,
            status=status,
            created_at=created_at,
            paid_at=paid_at,
        )
        return Account(
            address=address,
            lamports=rent_minimum if lamports is None else lamports,
            owner=program_id,
            data=encode_invoice(invoice),
        )

    return _make
