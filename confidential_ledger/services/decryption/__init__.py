"""Decryption authority package."""

from confidential_ledger.services.decryption.interface import (
    ClearValue,
    DecryptionAuthorityInterface,
    DecryptionDeniedError,
    DecryptionError,
    DecryptionPendingError,
    UnknownHandleError,
)
from confidential_ledger.services.decryption.client import DecryptionClient

__all__ = [
    "ClearValue",
    "DecryptionAuthorityInterface",
    "DecryptionClient",
    "DecryptionDeniedError",
    "DecryptionError",
    "DecryptionPendingError",
    "UnknownHandleError",
]
