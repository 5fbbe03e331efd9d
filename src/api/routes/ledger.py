"""Ledger API Routes

FastAPI routes for invoice creation, payment, and account queries.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.ledger_request import (
    AirdropRequestSchema,
    CreateInvoiceRequestSchema,
    ProcessPaymentRequestSchema,
)
from src.app.services.clock import Clock
from src.app.use_cases.ledger import (
    AuditInvoices,
    AuditResultDTO,
    BalanceResponseDTO,
    CreateInvoice,
    CreateInvoiceCommandDTO,
    CreateInvoiceResponseDTO,
    FundAccount,
    FundAccountCommandDTO,
    GetBalance,
    GetInvoice,
    InvoiceResponseDTO,
    ListInvoices,
    ListInvoicesResponseDTO,
    PaymentResponseDTO,
    ProcessPayment,
    ProcessPaymentCommandDTO,
)
from src.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.value_transfer import SystemProgramTransfer
from src.depends import get_clock, get_rent, get_session
from src.domain.account import Rent
from src.domain.errors import LedgerErrorCode
from src.domain.invoice import InvoiceStatus
from libs.result import Error

router = APIRouter(prefix="/ledger", tags=["Ledger"])

ERROR_STATUS = {
    LedgerErrorCode.INVOICE_NOT_PENDING.value: status.HTTP_409_CONFLICT,
    LedgerErrorCode.INSUFFICIENT_PAYMENT_AMOUNT.value: status.HTTP_402_PAYMENT_REQUIRED,
    LedgerErrorCode.INVALID_CREATOR.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.ADDRESS_IN_USE.value: status.HTTP_409_CONFLICT,
    LedgerErrorCode.ADDRESS_MISMATCH.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.MISSING_SIGNATURE.value: status.HTTP_403_FORBIDDEN,
    LedgerErrorCode.INSUFFICIENT_FUNDS.value: status.HTTP_402_PAYMENT_REQUIRED,
    LedgerErrorCode.INVALID_ACCOUNT_OWNER.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.ARITHMETIC_OVERFLOW.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.ACCOUNT_NOT_INITIALIZED.value: status.HTTP_404_NOT_FOUND,
    LedgerErrorCode.ACCOUNT_DID_NOT_DESERIALIZE.value: status.HTTP_422_UNPROCESSABLE_ENTITY,
    LedgerErrorCode.DESCRIPTION_TOO_LONG.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.INVALID_PUBLIC_KEY.value: status.HTTP_400_BAD_REQUEST,
    LedgerErrorCode.FAUCET_DISABLED.value: status.HTTP_403_FORBIDDEN,
    LedgerErrorCode.FAUCET_LIMIT_EXCEEDED.value: status.HTTP_400_BAD_REQUEST,
}


def _raise_for(error: Error):
    raise ClientError(
        error,
        status_code=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


@router.post(
    "/invoices",
    response_model=CreateInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Creator already has an invoice",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "AddressInUse",
                            "message": "Invoice address is already in use"
                        }
                    }
                }
            }
        },
        402: {"description": "Creator cannot fund the invoice account"},
        403: {"description": "Creator did not sign"},
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    rent: Rent = Depends(get_rent),
):
    """
    Create a pending invoice in the creator's derived slot.

    **Request body:**
    - `creator` (required): Base58 creator key
    - `amount` (required): Minimum settlement amount in lamports
    - `description` (optional): Memo, at most 400 UTF-8 bytes
    - `signers` (required for success): Must include `creator`

    **Returns:**
    - 201: Invoice created; body carries the invoice, bump, rent paid and logs
    - 400: Description too long or address mismatch
    - 402: Creator balance cannot cover the rent deposit
    - 403: Creator signature missing
    - 409: Creator already has an invoice
    """
    account_repo = SqlAlchemyAccountRepository(session)
    use_case = CreateInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=account_repo,
        value_transfer=SystemProgramTransfer(account_repo),
        clock=clock,
        program_id=ApplicationConfig.PROGRAM_ID,
        rent=rent,
    )

    command = CreateInvoiceCommandDTO(
        creator=request.creator,
        amount=request.amount,
        description=request.description,
        signers=request.signers,
        invoice_address=request.invoice_address,
    )

    result = await use_case.execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.post(
    "/payments",
    response_model=PaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        409: {
            "description": "Invoice already paid",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "InvoiceNotPending",
                            "message": "Invoice is not in pending status"
                        }
                    }
                }
            }
        },
        402: {"description": "Payment below invoice amount or payer balance too low"},
        400: {"description": "Invalid creator or address mismatch"},
        404: {"description": "Invoice not found"},
    }
)
async def process_payment(
    request: ProcessPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Pay an invoice: transfer `amount` lamports from payer to creator and mark
    the invoice paid. Overpayment is transferred in full.

    **Returns:**
    - 200: Invoice paid; body carries the invoice, balances after and logs
    - 400: Invalid creator / address mismatch
    - 402: Amount below invoice amount, or payer lacks funds
    - 403: Payer signature missing
    - 404: No invoice at the address
    - 409: Invoice is not pending
    """
    account_repo = SqlAlchemyAccountRepository(session)
    use_case = ProcessPayment(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=account_repo,
        value_transfer=SystemProgramTransfer(account_repo),
        clock=clock,
        program_id=ApplicationConfig.PROGRAM_ID,
    )

    command = ProcessPaymentCommandDTO(
        invoice_address=request.invoice_address,
        creator=request.creator,
        payer=request.payer,
        amount=request.amount,
        signers=request.signers,
    )

    result = await use_case.execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get(
    "/invoices",
    response_model=ListInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    creator: Optional[str] = Query(default=None, description="Filter by creator key"),
    invoice_status: Optional[InvoiceStatus] = Query(default=None, alias="status", description="Filter by status"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """List invoice accounts, newest first."""
    use_case = ListInvoices(SqlAlchemyAccountRepository(session), ApplicationConfig.PROGRAM_ID)
    result = await use_case.execute(
        creator=creator, status=invoice_status, limit=limit, offset=offset
    )

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get(
    "/invoices/{address}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_invoice(
    address: str,
    session: AsyncSession = Depends(get_session),
):
    """Fetch the invoice stored at an address."""
    use_case = GetInvoice(SqlAlchemyAccountRepository(session), ApplicationConfig.PROGRAM_ID)
    result = await use_case.execute(address)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get(
    "/creators/{creator}/invoice",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_creator_invoice(
    creator: str,
    session: AsyncSession = Depends(get_session),
):
    """Fetch the invoice in a creator's derived slot."""
    use_case = GetInvoice(SqlAlchemyAccountRepository(session), ApplicationConfig.PROGRAM_ID)
    result = await use_case.execute_for_creator(creator)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get(
    "/accounts/{address}/balance",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_balance(
    address: str,
    session: AsyncSession = Depends(get_session),
):
    """Balance of an account in lamports and SOL. Unknown addresses hold 0."""
    use_case = GetBalance(SqlAlchemyAccountRepository(session))
    result = await use_case.execute(address)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.post(
    "/accounts/{address}/airdrop",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def airdrop(
    address: str,
    request: AirdropRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Credit lamports to an account from the faucet."""
    use_case = FundAccount(
        uow=SqlAlchemyUnitOfWork(session),
        account_repo=SqlAlchemyAccountRepository(session),
        enabled=ApplicationConfig.FAUCET_ENABLED,
        max_lamports=ApplicationConfig.FAUCET_MAX_LAMPORTS,
    )
    result = await use_case.execute(
        FundAccountCommandDTO(address=address, lamports=request.lamports)
    )

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.get(
    "/audit",
    response_model=AuditResultDTO,
    status_code=status.HTTP_200_OK,
)
async def audit_invoices(
    session: AsyncSession = Depends(get_session),
    rent: Rent = Depends(get_rent),
):
    """Run a read-only invariant audit over every invoice account."""
    use_case = AuditInvoices(
        SqlAlchemyAccountRepository(session), ApplicationConfig.PROGRAM_ID, rent=rent
    )
    result = await use_case.execute()

    if result.is_err():
        _raise_for(result.error)

    return result.value
