"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.invoice import U64_MAX


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    creator: str = Field(
        ...,
        description="Base58 key of the invoice creator (must sign)"
    )

    amount: int = Field(
        ...,
        ge=0,
        le=U64_MAX,
        description="Minimum settlement amount in lamports"
    )

    description: str = Field(
        default="",
        description="Free-form memo (max 400 UTF-8 bytes)"
    )

    signers: List[str] = Field(
        default_factory=list,
        description="Keys that signed the enclosing transaction"
    )

    invoice_address: Optional[str] = Field(
        default=None,
        description="Expected invoice address; must match the derived address when given"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "creator": "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                "amount": 1000,
                "description": "rent",
                "signers": ["9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"],
            }
        }


class ProcessPaymentCommandDTO(BaseModel):
    """
    Command DTO for settling an invoice

    Used as input to ProcessPayment use case.
    """

    invoice_address: str = Field(
        ...,
        description="Base58 address of the invoice account"
    )

    creator: str = Field(
        ...,
        description="Base58 key of the creator account to credit"
    )

    payer: str = Field(
        ...,
        description="Base58 key of the paying account (must sign)"
    )

    amount: int = Field(
        ...,
        ge=0,
        le=U64_MAX,
        description="Lamports to transfer (must be >= invoice amount)"
    )

    signers: List[str] = Field(
        default_factory=list,
        description="Keys that signed the enclosing transaction"
    )


class FundAccountCommandDTO(BaseModel):
    """Command DTO for crediting a wallet from the faucet"""

    address: str = Field(
        ...,
        description="Base58 key of the account to fund"
    )

    lamports: int = Field(
        ...,
        gt=0,
        description="Lamports to credit (must be > 0)"
    )


class InvoiceResponseDTO(BaseModel):
    """Response DTO for a decoded invoice account"""

    address: str
    creator: str
    amount: int
    description: str
    status: str
    created_at: int
    paid_at: int
    lamports: int = Field(
        ...,
        description="Balance held by the invoice account (rent deposit)"
    )


class CreateInvoiceResponseDTO(BaseModel):
    """Response DTO for a created invoice"""

    invoice: InvoiceResponseDTO
    bump: int
    rent_lamports: int = Field(
        ...,
        description="Lamports moved from the creator to fund the invoice account"
    )
    logs: List[str] = Field(default_factory=list)


class PaymentResponseDTO(BaseModel):
    """Response DTO for a settled invoice"""

    invoice: InvoiceResponseDTO
    payer: str
    amount: int
    payer_balance_after: int
    creator_balance_after: int
    logs: List[str] = Field(default_factory=list)


class ListInvoicesResponseDTO(BaseModel):
    """Response DTO for listing invoices"""

    invoices: List[InvoiceResponseDTO]
    total: int
    limit: int
    offset: int


class BalanceResponseDTO(BaseModel):
    """Response DTO for an account balance"""

    address: str
    lamports: int
    sol: Decimal = Field(
        ...,
        description="Balance in SOL (lamports / 10^9)"
    )
    last_updated: Optional[datetime] = None


class InvoiceViolationDTO(BaseModel):
    """A broken invariant found on one invoice account"""

    address: str
    creator: Optional[str] = None
    violation: str


class AuditResultDTO(BaseModel):
    """Result of an invoice account audit"""

    total_accounts_checked: int
    violations_found: int
    violations: List[InvoiceViolationDTO]
    audit_time: datetime
    execution_time_ms: int


def to_invoice_response(address: str, lamports: int, invoice) -> InvoiceResponseDTO:
    """Build the response DTO for a decoded invoice held at `address`"""
    return InvoiceResponseDTO(
        address=address,
        creator=invoice.creator,
        amount=invoice.amount,
        description=invoice.description,
        status=invoice.status.value,
        created_at=invoice.created_at,
        paid_at=invoice.paid_at,
        lamports=lamports,
    )
