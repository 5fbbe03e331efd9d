"""Invoice Account Layout

Fixed 469-byte little-endian layout of an invoice account:

    discriminator  8   sha256("account:Invoice")[:8]
    creator       32
    amount         8   u64
    description  4+400 u32 length prefix, UTF-8 bytes
    status         1   0 = pending, 1 = paid
    created_at     8   i64
    paid_at        8   i64

Fields are packed in order; the unused tail of the buffer is zero filled.
"""

import hashlib
import struct

from src.domain.address import (
    PUBKEY_LENGTH,
    InvalidPublicKeyError,
    decode_pubkey,
    encode_pubkey,
)
from src.domain.invoice import (
    MAX_DESCRIPTION_BYTES,
    Invoice,
    InvoiceStatus,
)

DISCRIMINATOR_LENGTH = 8
INVOICE_DISCRIMINATOR = hashlib.sha256(b"account:Invoice").digest()[:DISCRIMINATOR_LENGTH]

INVOICE_SPACE = (
    DISCRIMINATOR_LENGTH
    + PUBKEY_LENGTH             # creator
    + 8                         # amount
    + 4 + MAX_DESCRIPTION_BYTES # description
    + 1                         # status
    + 8                         # created_at
    + 8                         # paid_at
)

STATUS_TAGS = {
    InvoiceStatus.PENDING: 0,
    InvoiceStatus.PAID: 1,
}
TAG_STATUSES = {tag: status for status, tag in STATUS_TAGS.items()}

_AMOUNT = struct.Struct("<Q")
_LENGTH = struct.Struct("<I")
_TAIL = struct.Struct("<Bqq")


class InvoiceLayoutError(ValueError):
    """Raised when account data is not a valid invoice record"""


def encode_invoice(invoice: Invoice) -> bytes:
    """Serialize an invoice into its full 469-byte account buffer"""
    description = invoice.description.encode("utf-8")
    if len(description) > MAX_DESCRIPTION_BYTES:
        raise InvoiceLayoutError(
            f"Description of {len(description)} bytes exceeds {MAX_DESCRIPTION_BYTES}"
        )

    body = b"".join([
        INVOICE_DISCRIMINATOR,
        decode_pubkey(invoice.creator),
        _AMOUNT.pack(invoice.amount),
        _LENGTH.pack(len(description)),
        description,
        _TAIL.pack(STATUS_TAGS[invoice.status], invoice.created_at, invoice.paid_at),
    ])
    return body.ljust(INVOICE_SPACE, b"\x00")


def decode_invoice(data: bytes) -> Invoice:
    """Deserialize an invoice from account data"""
    if len(data) < DISCRIMINATOR_LENGTH or data[:DISCRIMINATOR_LENGTH] != INVOICE_DISCRIMINATOR:
        raise InvoiceLayoutError("Account discriminator does not match Invoice")

    offset = DISCRIMINATOR_LENGTH
    try:
        creator = encode_pubkey(data[offset:offset + PUBKEY_LENGTH])
        offset += PUBKEY_LENGTH

        (amount,) = _AMOUNT.unpack_from(data, offset)
        offset += _AMOUNT.size

        (length,) = _LENGTH.unpack_from(data, offset)
        offset += _LENGTH.size
        if length > MAX_DESCRIPTION_BYTES:
            raise InvoiceLayoutError(
                f"Description length prefix {length} exceeds {MAX_DESCRIPTION_BYTES}"
            )
        raw_description = data[offset:offset + length]
        if len(raw_description) != length:
            raise InvoiceLayoutError("Account data truncated inside description")
        description = raw_description.decode("utf-8")
        offset += length

        tag, created_at, paid_at = _TAIL.unpack_from(data, offset)
    except InvoiceLayoutError:
        raise
    except (struct.error, InvalidPublicKeyError) as e:
        raise InvoiceLayoutError(f"Account data truncated: {e}") from e
    except UnicodeDecodeError as e:
        raise InvoiceLayoutError(f"Description is not valid UTF-8: {e}") from e

    if tag not in TAG_STATUSES:
        raise InvoiceLayoutError(f"Unknown invoice status tag {tag}")

    return Invoice(
        creator=creator,
        amount=amount,
        description=description,
        status=TAG_STATUSES[tag],
        created_at=created_at,
        paid_at=paid_at,
    )
