"""Invoice Domain Entity

The invoice record stored inside an invoice account's data. One invoice slot
exists per creator, addressed by a program derived address.
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field, field_validator

U64_MAX = 2**64 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

MAX_DESCRIPTION_CHARS = 100
MAX_DESCRIPTION_BYTES = MAX_DESCRIPTION_CHARS * 4


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states"""
    PENDING = "pending"
    PAID = "paid"


class InvalidTransitionError(ValueError):
    """Raised when a status transition is not allowed"""


class Invoice(BaseModel):
    """
    Invoice - Obligation owed to a creator

    Domain Rules:
    - creator and amount are set once at creation
    - Status transitions: pending -> paid, nothing else
    - paid_at is 0 while pending
    - paid_at >= created_at once paid
    - Encoded description never exceeds 400 bytes
    """

    creator: str = Field(
        ...,
        description="Base58 key of the party entitled to payment"
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

    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Invoice status (pending, paid)"
    )

    created_at: int = Field(
        ...,
        ge=I64_MIN,
        le=I64_MAX,
        description="Ledger clock at creation (unix seconds)"
    )

    paid_at: int = Field(
        default=0,
        ge=I64_MIN,
        le=I64_MAX,
        description="Ledger clock at settlement (unix seconds, 0 while pending)"
    )

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if description_byte_length(v) > MAX_DESCRIPTION_BYTES:
            raise ValueError(
                f"Description encodes to more than {MAX_DESCRIPTION_BYTES} bytes"
            )
        return v

    def is_pending(self) -> bool:
        return self.status == InvoiceStatus.PENDING

    def mark_paid(self, now: int) -> None:
        """Transition pending -> paid, stamping the settlement time"""
        if not self.is_pending():
            raise InvalidTransitionError(
                f"Cannot mark invoice paid from status {self.status.value}"
            )
        self.status = InvoiceStatus.PAID
        self.paid_at = now

    def invariant_violations(self) -> List[str]:
        """Describe every broken lifecycle invariant (empty when consistent)"""
        violations = []
        if self.status == InvoiceStatus.PENDING and self.paid_at != 0:
            violations.append(f"pending invoice has paid_at={self.paid_at}")
        if self.status == InvoiceStatus.PAID:
            if self.created_at <= 0:
                violations.append(f"paid invoice has created_at={self.created_at}")
            if self.paid_at < self.created_at:
                violations.append(
                    f"paid_at={self.paid_at} precedes created_at={self.created_at}"
                )
        return violations


def description_byte_length(description: str) -> int:
    return len(description.encode("utf-8"))
