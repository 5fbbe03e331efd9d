"""Integration tests for Ledger API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

from config import ApplicationConfig
from src.domain.account import Account
from tests.conftest import make_key
from tests.integration.conftest import LEDGER_NOW

LEDGER = f"{ApplicationConfig.API_PREFIX}/ledger"


async def airdrop(client: AsyncClient, address: str, lamports: int):
    response = await client.post(f"{LEDGER}/accounts/{address}/airdrop", json={"lamports": lamports})
    assert response.status_code == 200
    return response.json()


async def create_invoice(client: AsyncClient, creator: str, amount: int = 1_000, description: str = "rent", signers=None):
    return await client.post(
        f"{LEDGER}/invoices",
        json={
            "creator": creator,
            "amount": amount,
            "description": description,
            "signers": [creator] if signers is None else signers,
        },
    )


async def pay(client: AsyncClient, invoice_address: str, creator: str, payer: str, amount: int, signers=None):
    return await client.post(
        f"{LEDGER}/payments",
        json={
            "invoice_address": invoice_address,
            "creator": creator,
            "payer": payer,
            "amount": amount,
            "signers": [payer] if signers is None else signers,
        },
    )


class TestHealthAPI:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAccountsAPI:

    @pytest.mark.asyncio
    async def test_airdrop_and_balance(self, client: AsyncClient, payer):
        data = await airdrop(client, payer, 1_500_000_000)
        assert data["lamports"] == 1_500_000_000

        response = await client.get(f"{LEDGER}/accounts/{payer}/balance")

        assert response.status_code == 200
        data = response.json()
        assert data["address"] == payer
        assert data["lamports"] == 1_500_000_000
        assert Decimal(data["sol"]) == Decimal("1.5")

    @pytest.mark.asyncio
    async def test_unknown_account_balance_is_zero(self, client: AsyncClient):
        response = await client.get(f"{LEDGER}/accounts/{make_key(77)}/balance")

        assert response.status_code == 200
        assert response.json()["lamports"] == 0
        assert response.json()["last_updated"] is None

    @pytest.mark.asyncio
    async def test_balance_invalid_address(self, client: AsyncClient):
        response = await client.get(f"{LEDGER}/accounts/not-a-key/balance")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidPublicKey"

    @pytest.mark.asyncio
    async def test_airdrop_over_faucet_limit(self, client: AsyncClient, payer):
        response = await client.post(
            f"{LEDGER}/accounts/{payer}/airdrop",
            json={"lamports": ApplicationConfig.FAUCET_MAX_LAMPORTS + 1},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FaucetLimitExceeded"

    @pytest.mark.asyncio
    async def test_airdrop_requires_positive_amount(self, client: AsyncClient, payer):
        response = await client.post(f"{LEDGER}/accounts/{payer}/airdrop", json={"lamports": 0})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestCreateInvoiceAPI:

    @pytest.mark.asyncio
    async def test_create_invoice_success(
        self, client: AsyncClient, creator, invoice_address, rent_minimum
    ):
        await airdrop(client, creator, 10_000_000)

        response = await create_invoice(client, creator)

        assert response.status_code == 201
        data = response.json()
        assert data["invoice"]["address"] == invoice_address
        assert data["invoice"]["creator"] == creator
        assert data["invoice"]["amount"] == 1_000
        assert data["invoice"]["description"] == "rent"
        assert data["invoice"]["status"] == "pending"
        assert data["invoice"]["created_at"] == LEDGER_NOW
        assert data["invoice"]["paid_at"] == 0
        assert data["invoice"]["lamports"] == rent_minimum
        assert data["rent_lamports"] == rent_minimum
        assert data["logs"] == ["Invoice created with amount 1000 lamports"]

    @pytest.mark.asyncio
    async def test_create_invoice_twice_conflicts(self, client: AsyncClient, creator):
        await airdrop(client, creator, 10_000_000)
        first = await create_invoice(client, creator)
        assert first.status_code == 201

        response = await create_invoice(client, creator, amount=5)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "AddressInUse"

    @pytest.mark.asyncio
    async def test_create_invoice_without_funds(self, client: AsyncClient, creator):
        response = await create_invoice(client, creator)

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "InsufficientFunds"

    @pytest.mark.asyncio
    async def test_create_invoice_unsigned(self, client: AsyncClient, creator, payer):
        response = await create_invoice(client, creator, signers=[payer])

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "MissingSignature"

    @pytest.mark.asyncio
    async def test_create_invoice_description_too_long(self, client: AsyncClient, creator):
        response = await create_invoice(client, creator, description="a" * 401)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DescriptionTooLong"

    @pytest.mark.asyncio
    async def test_create_invoice_invalid_creator_key(self, client: AsyncClient):
        response = await create_invoice(client, "not-a-key")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_invoice_negative_amount(self, client: AsyncClient, creator):
        response = await create_invoice(client, creator, amount=-1)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestPaymentAPI:

    @pytest.mark.asyncio
    async def test_pay_invoice(self, client: AsyncClient, creator, payer, invoice_address):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)

        response = await pay(client, invoice_address, creator, payer, 1_000)

        assert response.status_code == 200
        data = response.json()
        assert data["invoice"]["status"] == "paid"
        assert data["invoice"]["paid_at"] == LEDGER_NOW
        assert data["payer_balance_after"] == 4_000
        assert data["logs"] == ["Payment processed for 1000 lamports"]

        balance = await client.get(f"{LEDGER}/accounts/{payer}/balance")
        assert balance.json()["lamports"] == 4_000

    @pytest.mark.asyncio
    async def test_pay_twice_conflicts(self, client: AsyncClient, creator, payer, invoice_address):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)
        assert (await pay(client, invoice_address, creator, payer, 1_000)).status_code == 200

        response = await pay(client, invoice_address, creator, payer, 1_000)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "InvoiceNotPending"

    @pytest.mark.asyncio
    async def test_underpayment(self, client: AsyncClient, creator, payer, invoice_address):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)

        response = await pay(client, invoice_address, creator, payer, 999)

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "InsufficientPaymentAmount"
        assert error["reason"] == "amount=999, required=1000"

    @pytest.mark.asyncio
    async def test_wrong_creator(
        self, client: AsyncClient, creator, other_creator, payer, invoice_address
    ):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)

        response = await pay(client, invoice_address, other_creator, payer, 1_000)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidCreator"

    @pytest.mark.asyncio
    async def test_pay_missing_invoice(self, client: AsyncClient, creator, payer, invoice_address):
        response = await pay(client, invoice_address, creator, payer, 1_000)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "AccountNotInitialized"


class TestInvoiceQueriesAPI:

    @pytest.mark.asyncio
    async def test_get_invoice_by_address_and_creator(
        self, client: AsyncClient, creator, invoice_address
    ):
        await airdrop(client, creator, 10_000_000)
        await create_invoice(client, creator, amount=250, description="hosting")

        by_address = await client.get(f"{LEDGER}/invoices/{invoice_address}")
        by_creator = await client.get(f"{LEDGER}/creators/{creator}/invoice")

        assert by_address.status_code == 200
        assert by_creator.status_code == 200
        assert by_address.json() == by_creator.json()
        assert by_address.json()["amount"] == 250
        assert by_address.json()["description"] == "hosting"

    @pytest.mark.asyncio
    async def test_get_invoice_not_found(self, client: AsyncClient, invoice_address):
        response = await client.get(f"{LEDGER}/invoices/{invoice_address}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "AccountNotInitialized"

    @pytest.mark.asyncio
    async def test_list_invoices_with_status_filter(
        self, client: AsyncClient, creator, other_creator, payer, invoice_address
    ):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, other_creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)
        await create_invoice(client, other_creator, amount=2_000)
        await pay(client, invoice_address, creator, payer, 1_000)

        everything = await client.get(f"{LEDGER}/invoices")
        paid = await client.get(f"{LEDGER}/invoices", params={"status": "paid"})
        mine = await client.get(f"{LEDGER}/invoices", params={"creator": other_creator})

        assert everything.status_code == 200
        assert everything.json()["total"] == 2
        assert paid.json()["total"] == 1
        assert paid.json()["invoices"][0]["address"] == invoice_address
        assert mine.json()["total"] == 1
        assert mine.json()["invoices"][0]["amount"] == 2_000

    @pytest.mark.asyncio
    async def test_list_invoices_rejects_unknown_status(self, client: AsyncClient):
        response = await client.get(f"{LEDGER}/invoices", params={"status": "cancelled"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestAuditAPI:

    @pytest.mark.asyncio
    async def test_audit_clean_ledger(self, client: AsyncClient, creator, payer, invoice_address):
        await airdrop(client, creator, 10_000_000)
        await airdrop(client, payer, 5_000)
        await create_invoice(client, creator)
        await pay(client, invoice_address, creator, payer, 1_000)

        response = await client.get(f"{LEDGER}/audit")

        assert response.status_code == 200
        data = response.json()
        assert data["total_accounts_checked"] == 1
        assert data["violations_found"] == 0

    @pytest.mark.asyncio
    async def test_audit_reports_corrupt_account(
        self, client: AsyncClient, db_session, program_id
    ):
        db_session.add(Account(address=make_key(88), owner=program_id, data=b"\x00" * 469))
        await db_session.commit()

        response = await client.get(f"{LEDGER}/audit")

        assert response.status_code == 200
        data = response.json()
        assert data["violations_found"] == 1
        assert data["violations"][0]["address"] == make_key(88)
        assert data["violations"][0]["violation"].startswith("undecodable:")
