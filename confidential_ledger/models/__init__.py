"""
Data Models Package

Pydantic models for everything that crosses a component boundary:
ciphertext references, proofs, access tags and ledger events.
None of them can carry a plaintext amount.
"""

from confidential_ledger.models.ciphertext import (
    HANDLE_SIZE,
    NULL_PRINCIPAL,
    AccessTag,
    AccessTagSet,
    Ciphertext,
    CiphertextHandle,
    CiphertextType,
    ExternalCiphertext,
    Proof,
    is_null_principal,
    is_reserved_principal,
    normalize_principal,
)
from confidential_ledger.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Ciphertext models
    "HANDLE_SIZE",
    "NULL_PRINCIPAL",
    "AccessTag",
    "AccessTagSet",
    "Ciphertext",
    "CiphertextHandle",
    "CiphertextType",
    "ExternalCiphertext",
    "Proof",
    "is_null_principal",
    "is_reserved_principal",
    "normalize_principal",
    # Event models
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
