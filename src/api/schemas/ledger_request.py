"""Request schemas for Ledger API

Pydantic models for validating incoming HTTP requests.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.address import is_valid_pubkey
from src.domain.invoice import U64_MAX


def _check_key(value: str, field: str) -> str:
    if not is_valid_pubkey(value):
        raise ValueError(f"{field} must be a base58-encoded 32-byte public key")
    return value


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /ledger/invoices endpoint.
    """

    creator: str = Field(
        ...,
        description="Base58 key of the invoice creator"
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
        description="Keys that signed the transaction (verified upstream)"
    )

    invoice_address: Optional[str] = Field(
        default=None,
        description="Expected invoice address (optional)"
    )

    @field_validator('creator')
    @classmethod
    def validate_creator(cls, v):
        return _check_key(v, "creator")

    class Config:
        json_schema_extra = {
            "example": {
                "creator": "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                "amount": 1000,
                "description": "rent",
                "signers": ["9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"]
            }
        }


class ProcessPaymentRequestSchema(BaseModel):
    """
    Request schema for paying an invoice

    Used for POST /ledger/payments endpoint.
    """

    invoice_address: str = Field(
        ...,
        description="Base58 address of the invoice account"
    )

    creator: str = Field(
        ...,
        description="Base58 key of the creator to credit"
    )

    payer: str = Field(
        ...,
        description="Base58 key of the paying account"
    )

    amount: int = Field(
        ...,
        ge=0,
        le=U64_MAX,
        description="Lamports to transfer (must cover the invoice amount)"
    )

    signers: List[str] = Field(
        default_factory=list,
        description="Keys that signed the transaction (verified upstream)"
    )

    @field_validator('invoice_address', 'creator', 'payer')
    @classmethod
    def validate_keys(cls, v, info):
        return _check_key(v, info.field_name)


class AirdropRequestSchema(BaseModel):
    """Request schema for POST /ledger/accounts/{address}/airdrop"""

    lamports: int = Field(
        ...,
        gt=0,
        le=U64_MAX,
        description="Lamports to credit (must be > 0)"
    )
