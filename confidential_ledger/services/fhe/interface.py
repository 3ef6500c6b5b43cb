"""
Encrypted Arithmetic Service Interface

DESIGN DECISION: The ledger never does cryptography itself. Everything it
needs from the encryption subsystem is expressed as this abstract
capability, injected into the ledger at construction. This allows us to:
1. Plug in a real FHE coprocessor client
2. Use a deterministic in-process backend for testing
3. Keep the ledger logic free of any cryptographic detail

Every method is synchronous and none of them reveal a plaintext to the
caller: inputs and outputs are Ciphertext references only.
"""

from abc import ABC, abstractmethod
from typing import Union

from confidential_ledger.models.ciphertext import (
    Ciphertext,
    CiphertextHandle,
    CiphertextType,
    ExternalCiphertext,
    Proof,
)


UINT64_MAX = 2**64 - 1


class EncryptedArithmeticService(ABC):
    """
    Abstract interface for the homomorphic arithmetic capability.

    Any backend (coprocessor client, local simulator, test double)
    must implement these methods.
    """

    @abstractmethod
    def encrypt_constant(self, value: int) -> Ciphertext:
        """
        Trivially encrypt a public constant.

        Args:
            value: Unsigned 64-bit integer

        Returns:
            An euint64 ciphertext

        Raises:
            ValueError: If value is outside the u64 range
        """
        pass

    @abstractmethod
    def verify_and_import(
        self,
        external: ExternalCiphertext,
        proof: Proof,
        expected_submitter: str,
    ) -> Ciphertext:
        """
        Verify an externally supplied ciphertext and import it.

        The proof must bind the ciphertext to expected_submitter and
        certify it is well-formed. A proof is consumed by a successful
        verification and cannot be replayed.

        Returns:
            The imported ciphertext, usable in further operations

        Raises:
            InvalidProofError: If verification or binding fails
        """
        pass

    @abstractmethod
    def add(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        """Homomorphic addition (wrapping at 2**64)."""
        pass

    @abstractmethod
    def greater_or_equal(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        """Homomorphic a >= b, returning an ebool ciphertext."""
        pass

    @abstractmethod
    def tag_for_internal_use(self, ciphertext: Ciphertext) -> None:
        """Allow the ledger itself to keep using the ciphertext."""
        pass

    @abstractmethod
    def tag_for_public_decryption(self, ciphertext: Ciphertext) -> None:
        """Allow anyone to request decryption of the ciphertext."""
        pass

    @abstractmethod
    def tag_for_principal(self, ciphertext: Ciphertext, principal: str) -> None:
        """Allow one principal to request decryption of the ciphertext."""
        pass

    @abstractmethod
    def handle_of(self, ciphertext: Ciphertext) -> CiphertextHandle:
        """Opaque external reference for the ciphertext."""
        pass


class InputEncryptor(ABC):
    """
    Client-side encryption of values before they are submitted.

    Lives with the submitter (wallet, SDK), never inside the ledger.
    """

    @abstractmethod
    def encrypt_input(
        self,
        value: Union[int, bool],
        submitter: str,
        ciphertext_type: CiphertextType = CiphertextType.EUINT64,
    ) -> tuple[ExternalCiphertext, Proof]:
        """
        Encrypt a value and produce a proof bound to submitter.

        Raises:
            ValueError: If the value does not fit the ciphertext type
        """
        pass
