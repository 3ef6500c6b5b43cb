"""
Decryption Authority Interface

The decryption authority is the only party that can turn a handle back
into a value. It lives outside the ledger and honours the access tags the
ledger attached: a handle can be decrypted publicly only if it was tagged
public, or by a principal only if that principal was granted access.

The ledger itself never talks to the authority. Clients do, after
receiving handles from ledger commands or events.
"""

from abc import ABC, abstractmethod
from typing import Union

from confidential_ledger.models.ciphertext import CiphertextHandle


ClearValue = Union[int, bool]


class DecryptionAuthorityInterface(ABC):
    """Abstract interface for an external decryption authority."""

    @abstractmethod
    def public_decrypt(self, handles: list[CiphertextHandle]) -> dict[str, ClearValue]:
        """
        Decrypt publicly decryptable handles.

        Args:
            handles: Handles to resolve in one batch

        Returns:
            Mapping of handle hex to cleartext (int for euint64, bool for ebool)

        Raises:
            DecryptionDeniedError: If any handle is not tagged public
            DecryptionPendingError: If the authority is not ready yet
            UnknownHandleError: If a handle was never produced
        """
        pass

    @abstractmethod
    def user_decrypt(self, handle: CiphertextHandle, principal: str) -> ClearValue:
        """
        Decrypt a handle on behalf of one principal.

        Raises:
            DecryptionDeniedError: If the principal has no access
            DecryptionPendingError: If the authority is not ready yet
            UnknownHandleError: If the handle was never produced
        """
        pass


class DecryptionError(Exception):
    """Base exception for decryption requests."""
    pass


class DecryptionDeniedError(DecryptionError):
    """Requester is not allowed to decrypt the handle."""

    def __init__(self, handle: CiphertextHandle, requester: str):
        self.handle = handle
        self.requester = requester
        super().__init__(f"{requester} may not decrypt {handle.hex()}")


class DecryptionPendingError(DecryptionError):
    """Authority has not finished processing the request; try again later."""

    def __init__(self, handle: CiphertextHandle):
        self.handle = handle
        super().__init__(f"Decryption of {handle.hex()} is still pending")


class UnknownHandleError(DecryptionError):
    """Handle does not refer to any ciphertext known to the authority."""

    def __init__(self, handle: CiphertextHandle):
        self.handle = handle
        super().__init__(f"Unknown handle {handle.hex()}")
