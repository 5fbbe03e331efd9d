"""Ledger Error Taxonomy

Program errors carry stable numbers (custom error space starts at 6000).
Host errors originate in the account store, signer validation, or the value
transfer primitive and are surfaced with the same Error shape.
"""

from enum import Enum
from typing import Optional
from libs.result import Error

PROGRAM_ERROR_OFFSET = 6000


class LedgerErrorCode(str, Enum):
    """Stable error kinds returned to callers"""
    # Program errors
    INVOICE_NOT_PENDING = "InvoiceNotPending"
    INSUFFICIENT_PAYMENT_AMOUNT = "InsufficientPaymentAmount"
    INVALID_CREATOR = "InvalidCreator"

    # Host errors
    ADDRESS_IN_USE = "AddressInUse"
    ADDRESS_MISMATCH = "AddressMismatch"
    MISSING_SIGNATURE = "MissingSignature"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INVALID_ACCOUNT_OWNER = "InvalidAccountOwner"
    ARITHMETIC_OVERFLOW = "ArithmeticOverflow"
    ACCOUNT_NOT_INITIALIZED = "AccountNotInitialized"
    ACCOUNT_DID_NOT_DESERIALIZE = "AccountDidNotDeserialize"
    DESCRIPTION_TOO_LONG = "DescriptionTooLong"
    INVALID_PUBLIC_KEY = "InvalidPublicKey"
    FAUCET_DISABLED = "FaucetDisabled"
    FAUCET_LIMIT_EXCEEDED = "FaucetLimitExceeded"


PROGRAM_ERRORS = (
    LedgerErrorCode.INVOICE_NOT_PENDING,
    LedgerErrorCode.INSUFFICIENT_PAYMENT_AMOUNT,
    LedgerErrorCode.INVALID_CREATOR,
)

ERROR_MESSAGES = {
    LedgerErrorCode.INVOICE_NOT_PENDING: "Invoice is not in pending status",
    LedgerErrorCode.INSUFFICIENT_PAYMENT_AMOUNT: "Payment amount is less than invoice amount",
    LedgerErrorCode.INVALID_CREATOR: "Invalid invoice creator",
    LedgerErrorCode.ADDRESS_IN_USE: "Invoice address is already in use",
    LedgerErrorCode.ADDRESS_MISMATCH: "Invoice address does not match derivation from creator",
    LedgerErrorCode.MISSING_SIGNATURE: "Required signature is missing",
    LedgerErrorCode.INSUFFICIENT_FUNDS: "Insufficient lamports for transfer",
    LedgerErrorCode.INVALID_ACCOUNT_OWNER: "Transfer source must be a system account without data",
    LedgerErrorCode.ARITHMETIC_OVERFLOW: "Balance would overflow",
    LedgerErrorCode.ACCOUNT_NOT_INITIALIZED: "Invoice account is not initialized",
    LedgerErrorCode.ACCOUNT_DID_NOT_DESERIALIZE: "Failed to deserialize invoice account",
    LedgerErrorCode.DESCRIPTION_TOO_LONG: "Description exceeds the reserved 400-byte slot",
    LedgerErrorCode.INVALID_PUBLIC_KEY: "Invalid public key",
    LedgerErrorCode.FAUCET_DISABLED: "Airdrop faucet is disabled",
    LedgerErrorCode.FAUCET_LIMIT_EXCEEDED: "Airdrop amount exceeds faucet limit",
}


def error_number(code: LedgerErrorCode) -> Optional[int]:
    """Numeric code for program errors, None for host errors"""
    if code in PROGRAM_ERRORS:
        return PROGRAM_ERROR_OFFSET + PROGRAM_ERRORS.index(code)
    return None


def ledger_error(code: LedgerErrorCode, reason: Optional[str] = None) -> Error:
    """Build a result Error for a ledger error kind"""
    return Error(
        code=code.value,
        message=ERROR_MESSAGES[code],
        reason=reason,
    )
