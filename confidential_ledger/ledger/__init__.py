"""Encrypted ledger package."""

from confidential_ledger.ledger.state import (
    LedgerSnapshot,
    LedgerState,
    LedgerTransaction,
)
from confidential_ledger.ledger.store import EncryptedLedgerStore
from confidential_ledger.ledger.tagger import PermissionTagger

__all__ = [
    "EncryptedLedgerStore",
    "LedgerSnapshot",
    "LedgerState",
    "LedgerTransaction",
    "PermissionTagger",
]
