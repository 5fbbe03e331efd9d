"""Public Keys and Program Derived Addresses

Keys are 32 raw bytes, carried as base58 strings outside the domain.
A program derived address is a sha256 digest of seeds, bump and program id
that does not decode to an ed25519 point, so no private key can sign for it.
"""

import hashlib
from typing import List, Sequence, Tuple

import base58
from ecdsa.curves import Ed25519
from ecdsa.ellipticcurve import PointEdwards
from ecdsa.errors import MalformedPointError

PUBKEY_LENGTH = 32
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16
PDA_MARKER = b"ProgramDerivedAddress"

INVOICE_SEED = b"invoice"
# Seed suffix length taken from the creator key (kept for address compatibility)
CREATOR_PREFIX_SEED_LENGTH = 8


class InvalidPublicKeyError(ValueError):
    """Raised when a string or byte sequence is not a 32-byte key"""


class InvalidSeedsError(ValueError):
    """Raised when seeds violate the derivation limits"""


class NoViableBumpError(ValueError):
    """Raised when every bump yields an on-curve point"""


def decode_pubkey(value: str) -> bytes:
    """Decode a base58 key string into 32 raw bytes"""
    try:
        raw = base58.b58decode(value)
    except ValueError as e:
        raise InvalidPublicKeyError(f"Invalid base58 key {value!r}: {e}") from e
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidPublicKeyError(
            f"Key {value!r} decodes to {len(raw)} bytes, expected {PUBKEY_LENGTH}"
        )
    return raw


def encode_pubkey(raw: bytes) -> str:
    """Encode 32 raw key bytes as base58"""
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidPublicKeyError(
            f"Key has {len(raw)} bytes, expected {PUBKEY_LENGTH}"
        )
    return base58.b58encode(raw).decode("ascii")


def is_valid_pubkey(value: str) -> bool:
    try:
        decode_pubkey(value)
    except InvalidPublicKeyError:
        return False
    return True


def is_on_curve(raw: bytes) -> bool:
    """True if the bytes are a valid compressed ed25519 point"""
    try:
        PointEdwards.from_bytes(Ed25519.curve, raw)
    except MalformedPointError:
        return False
    return True


def create_program_address(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    """
    Hash seeds and program id into an address

    Raises:
        InvalidSeedsError: too many seeds or a seed longer than 32 bytes
        NoViableBumpError: the digest lands on the ed25519 curve
    """
    if len(seeds) > MAX_SEEDS:
        raise InvalidSeedsError(f"At most {MAX_SEEDS} seeds allowed, got {len(seeds)}")

    hasher = hashlib.sha256()
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise InvalidSeedsError(
                f"Seed of {len(seed)} bytes exceeds {MAX_SEED_LENGTH}"
            )
        hasher.update(seed)
    hasher.update(program_id)
    hasher.update(PDA_MARKER)
    digest = hasher.digest()

    if is_on_curve(digest):
        raise NoViableBumpError("Derived address lies on the ed25519 curve")
    return digest


def find_program_address(seeds: Sequence[bytes], program_id: bytes) -> Tuple[bytes, int]:
    """
    Find the canonical (highest) bump that yields an off-curve address

    Returns:
        (address bytes, bump)
    """
    for bump in range(255, -1, -1):
        try:
            address = create_program_address(list(seeds) + [bytes([bump])], program_id)
        except NoViableBumpError:
            continue
        return address, bump
    raise NoViableBumpError("Unable to find a viable program address bump")


def invoice_seeds(creator: bytes) -> List[bytes]:
    """Seed tuple for a creator's invoice slot: ("invoice", K, K[0..8])"""
    if len(creator) != PUBKEY_LENGTH:
        raise InvalidPublicKeyError(
            f"Creator key has {len(creator)} bytes, expected {PUBKEY_LENGTH}"
        )
    return [INVOICE_SEED, creator, creator[:CREATOR_PREFIX_SEED_LENGTH]]


def derive_invoice_address(creator: str, program_id: str) -> Tuple[str, int]:
    """Base58 invoice address and bump for a base58 creator key"""
    address, bump = find_program_address(
        invoice_seeds(decode_pubkey(creator)),
        decode_pubkey(program_id),
    )
    return encode_pubkey(address), bump
