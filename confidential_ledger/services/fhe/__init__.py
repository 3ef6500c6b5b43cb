"""Encrypted arithmetic services package."""

from confidential_ledger.services.fhe.interface import (
    UINT64_MAX,
    EncryptedArithmeticService,
    InputEncryptor,
)
from confidential_ledger.services.fhe.mock_backend import MockFHEBackend

__all__ = [
    "UINT64_MAX",
    "EncryptedArithmeticService",
    "InputEncryptor",
    "MockFHEBackend",
]
