"""Account Domain Entity

A keyed record in the account store. Wallets are plain accounts owned by the
system program with no data; invoice accounts are owned by the ledger program
and carry the fixed-size invoice layout in `data`.
"""

from datetime import datetime, timezone
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, DateTime, LargeBinary, String
from src.domain.base import BaseModel

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

LAMPORTS_PER_SOL = 1_000_000_000

# Bytes of per-account metadata charged on top of the data length
ACCOUNT_STORAGE_OVERHEAD = 128
DEFAULT_LAMPORTS_PER_BYTE_YEAR = 3480
DEFAULT_EXEMPTION_THRESHOLD = 2.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Account(BaseModel, table=True):
    """
    Account - Balance and opaque data addressed by a base58 key

    Domain Rules:
    - address is unique (primary key)
    - lamports must be non-negative
    - Only the owning program may write `data`
    - Balances move only through the value transfer service
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint('lamports >= 0', name='lamports_non_negative'),
    )

    address: str = Field(
        sa_column=Column(String(44), primary_key=True),
        description="Base58-encoded 32-byte account key"
    )

    lamports: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Balance in base units (lamports)"
    )

    owner: str = Field(
        default=SYSTEM_PROGRAM_ID,
        sa_column=Column(String(44), nullable=False, index=True),
        description="Program that owns the account data"
    )

    data: bytes = Field(
        default=b"",
        sa_column=Column(LargeBinary, nullable=False, default=b""),
        description="Raw account data (program-defined layout)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last mutation timestamp"
    )

    def is_materialized(self) -> bool:
        """True once a program has allocated data or taken ownership"""
        return bool(self.data) or self.owner != SYSTEM_PROGRAM_ID

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "address": "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",
                "lamports": 5000000000,
                "owner": SYSTEM_PROGRAM_ID,
                "data": "",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class Rent(BaseModel):
    """Rent schedule used to size the balance an account must hold"""

    lamports_per_byte_year: int = DEFAULT_LAMPORTS_PER_BYTE_YEAR
    exemption_threshold: float = DEFAULT_EXEMPTION_THRESHOLD

    def minimum_balance(self, data_len: int) -> int:
        """Rent-exempt minimum for an account holding `data_len` bytes"""
        bytes_charged = ACCOUNT_STORAGE_OVERHEAD + data_len
        return int(bytes_charged * self.lamports_per_byte_year * self.exemption_threshold)
