"""
Ciphertext Value Models

These models describe encrypted values as the ledger sees them:
opaque references, never plaintext.

DESIGN DECISION: A Ciphertext carries ONLY its handle and its type.
There is no field, property or method that yields the underlying value,
not even for debugging. Whoever holds the plaintext (the arithmetic
backend, the decryption authority) keeps it on their side of the boundary.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


HANDLE_SIZE = 32

NULL_PRINCIPAL = "0x" + "0" * 40


# =============================================================================
# PRINCIPALS
# =============================================================================

def normalize_principal(value: Optional[str]) -> Optional[str]:
    """
    Canonical form of a principal.

    Hex addresses compare case-insensitively, so they are lower-cased.
    Returns None for the null principal (None, "", or the zero address).
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.lower().startswith("0x"):
        value = value.lower()
    if value == NULL_PRINCIPAL:
        return None
    return value


def is_null_principal(value: Optional[str]) -> bool:
    return normalize_principal(value) is None


# =============================================================================
# ENUMS
# =============================================================================

class CiphertextType(str, Enum):
    """Encrypted scalar types the ledger works with."""
    EUINT64 = "euint64"
    EBOOL = "ebool"


class AccessTag(str, Enum):
    """
    Well-known decryption consumers.

    Individual principals may also appear in an access tag set
    (caller-scoped grants); they are stored by their principal string,
    so a principal can never be named after one of these tags.
    """
    STORE = "store"    # The ledger itself may keep computing on it
    PUBLIC = "public"  # Anyone may ask the authority to decrypt it


def is_reserved_principal(value: Optional[str]) -> bool:
    """True for names that collide with a well-known access tag."""
    if value is None:
        return False
    return value.strip().lower() in {tag.value for tag in AccessTag}


# =============================================================================
# HANDLES AND CIPHERTEXTS
# =============================================================================

class CiphertextHandle(BaseModel):
    """
    Opaque, fixed-size reference to a ciphertext.

    Safe to log, emit and hand to external parties: it says WHICH value,
    never WHAT value.
    """
    model_config = ConfigDict(frozen=True)

    value: bytes = Field(
        ...,
        min_length=HANDLE_SIZE,
        max_length=HANDLE_SIZE,
        description="Raw handle bytes"
    )

    @classmethod
    def from_hex(cls, text: str) -> "CiphertextHandle":
        if text.startswith("0x"):
            text = text[2:]
        return cls(value=bytes.fromhex(text))

    def hex(self) -> str:
        return "0x" + self.value.hex()

    def __str__(self) -> str:
        return self.hex()


class Ciphertext(BaseModel):
    """
    An encrypted value the ledger can combine but never inspect.

    Only the arithmetic service can produce one.
    """
    model_config = ConfigDict(frozen=True)

    handle: CiphertextHandle
    ciphertext_type: CiphertextType = CiphertextType.EUINT64


class ExternalCiphertext(BaseModel):
    """
    Ciphertext produced off-ledger by a client encryptor.

    Not usable by the ledger until the arithmetic service verifies
    its proof and imports it.
    """
    model_config = ConfigDict(frozen=True)

    handle: CiphertextHandle
    ciphertext_type: CiphertextType = CiphertextType.EUINT64


class Proof(BaseModel):
    """
    Attestation submitted with an external ciphertext.

    Binds the ciphertext to its submitter. Consumed by verification,
    never persisted by the ledger.
    """
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., min_length=1)

    @field_validator("data")
    @classmethod
    def reject_blank(cls, v: bytes) -> bytes:
        if not v.strip(b"\x00"):
            raise ValueError("Proof data cannot be all zero bytes")
        return v


class AccessTagSet(BaseModel):
    """Consumers currently allowed to request decryption of one handle."""

    handle: CiphertextHandle
    consumers: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_public(self) -> bool:
        return AccessTag.PUBLIC.value in self.consumers

    @property
    def is_internal(self) -> bool:
        return AccessTag.STORE.value in self.consumers

    def allows(self, consumer: str) -> bool:
        return self.is_public or consumer in self.consumers
