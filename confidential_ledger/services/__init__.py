"""Services package."""

from confidential_ledger.services.decryption import (
    DecryptionAuthorityInterface,
    DecryptionClient,
    DecryptionDeniedError,
    DecryptionError,
    DecryptionPendingError,
    UnknownHandleError,
)
from confidential_ledger.services.fhe import (
    EncryptedArithmeticService,
    InputEncryptor,
    MockFHEBackend,
)
from confidential_ledger.services.storage import (
    EventStorageError,
    EventStorageInterface,
    InMemoryEventStorage,
    JsonLinesEventStorage,
)

__all__ = [
    # Decryption
    "DecryptionAuthorityInterface",
    "DecryptionClient",
    "DecryptionDeniedError",
    "DecryptionError",
    "DecryptionPendingError",
    "UnknownHandleError",
    # Encrypted arithmetic
    "EncryptedArithmeticService",
    "InputEncryptor",
    "MockFHEBackend",
    # Event storage
    "EventStorageError",
    "EventStorageInterface",
    "InMemoryEventStorage",
    "JsonLinesEventStorage",
]
