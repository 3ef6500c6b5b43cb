"""
In-Process FHE Backend

A deterministic stand-in for a real FHE coprocessor and its decryption
authority, for tests, demos and local development.

What it simulates faithfully:
- Opaque handles (32 bytes, derived from a counter, never from the value)
- Input proofs bound to the submitter (HMAC over handle, type and submitter)
- Single-use proofs (a verified input cannot be imported twice)
- Wrapping u64 addition and inclusive >= comparison
- Per-handle access control lists, honoured by decryption requests
- A decryption authority that may need a few rounds before answering

What it does NOT do: actual encryption. Cleartexts are kept in a private
registry on this side of the boundary. The ledger only ever receives
Ciphertext references and cannot read that registry.
"""

import hashlib
import hmac
import secrets
from typing import Optional, Union

from confidential_ledger.errors import InvalidProofError
from confidential_ledger.models.ciphertext import (
    AccessTag,
    AccessTagSet,
    Ciphertext,
    CiphertextHandle,
    CiphertextType,
    ExternalCiphertext,
    Proof,
    is_reserved_principal,
    normalize_principal,
)
from confidential_ledger.services.decryption.interface import (
    ClearValue,
    DecryptionAuthorityInterface,
    DecryptionDeniedError,
    DecryptionPendingError,
    UnknownHandleError,
)
from confidential_ledger.services.fhe.interface import (
    UINT64_MAX,
    EncryptedArithmeticService,
    InputEncryptor,
)


class MockFHEBackend(
    EncryptedArithmeticService,
    InputEncryptor,
    DecryptionAuthorityInterface,
):
    """
    Arithmetic service, client encryptor and decryption authority in one object.

    Args:
        secret: Key for input proofs. Random if not given.
        pending_rounds: How many decryption requests per handle answer
                        "pending" before the value is released.
    """

    def __init__(self, secret: Optional[bytes] = None, pending_rounds: int = 0):
        if pending_rounds < 0:
            raise ValueError("pending_rounds cannot be negative")
        self._secret = secret or secrets.token_bytes(32)
        self._pending_rounds = pending_rounds
        self._counter = 0
        self._cleartexts: dict[bytes, tuple[CiphertextType, ClearValue]] = {}
        self._acl: dict[bytes, set[str]] = {}
        # Inputs produced by encrypt_input and not yet imported
        self._inputs: dict[bytes, tuple[CiphertextType, ClearValue]] = {}
        self._consumed: set[bytes] = set()
        self._decrypt_requests: dict[bytes, int] = {}

    # =========================================================================
    # Internals
    # =========================================================================

    def _next_handle(self, label: str) -> CiphertextHandle:
        self._counter += 1
        digest = hashlib.sha256(
            b"mock-fhe|" + self._counter.to_bytes(8, "big") + b"|" + label.encode()
        ).digest()
        return CiphertextHandle(value=digest)

    def _store(
        self,
        label: str,
        ciphertext_type: CiphertextType,
        value: ClearValue,
    ) -> Ciphertext:
        handle = self._next_handle(label)
        self._cleartexts[handle.value] = (ciphertext_type, value)
        self._acl[handle.value] = set()
        return Ciphertext(handle=handle, ciphertext_type=ciphertext_type)

    def _lookup(self, ciphertext: Ciphertext, expected: CiphertextType) -> ClearValue:
        entry = self._cleartexts.get(ciphertext.handle.value)
        if entry is None:
            raise ValueError(f"Unknown ciphertext {ciphertext.handle.hex()}")
        ciphertext_type, value = entry
        if ciphertext_type != expected:
            raise ValueError(
                f"Expected {expected.value}, got {ciphertext_type.value} "
                f"for {ciphertext.handle.hex()}"
            )
        return value

    def _proof_for(
        self,
        handle: CiphertextHandle,
        ciphertext_type: CiphertextType,
        submitter: str,
    ) -> bytes:
        message = handle.value + ciphertext_type.value.encode() + submitter.encode()
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def _grant(self, ciphertext: Ciphertext, consumer: str) -> None:
        acl = self._acl.get(ciphertext.handle.value)
        if acl is None:
            raise ValueError(f"Unknown ciphertext {ciphertext.handle.hex()}")
        acl.add(consumer)

    @staticmethod
    def _check_range(value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Expected an integer, got {type(value).__name__}")
        if value < 0 or value > UINT64_MAX:
            raise ValueError(f"Value out of u64 range: {value}")

    # =========================================================================
    # Client-side encryptor
    # =========================================================================

    def encrypt_input(
        self,
        value: Union[int, bool],
        submitter: str,
        ciphertext_type: CiphertextType = CiphertextType.EUINT64,
    ) -> tuple[ExternalCiphertext, Proof]:
        """
        Encrypt a value for submission by one principal.

        This is what a wallet-side SDK does: the resulting proof only
        verifies when the same submitter presents it.
        """
        principal = normalize_principal(submitter)
        if principal is None:
            raise ValueError("Submitter cannot be the null principal")
        if ciphertext_type == CiphertextType.EUINT64:
            self._check_range(value)
            clear: ClearValue = int(value)
        else:
            clear = bool(value)

        handle = self._next_handle("input")
        self._inputs[handle.value] = (ciphertext_type, clear)
        proof = Proof(data=self._proof_for(handle, ciphertext_type, principal))
        return ExternalCiphertext(handle=handle, ciphertext_type=ciphertext_type), proof

    # =========================================================================
    # EncryptedArithmeticService
    # =========================================================================

    def encrypt_constant(self, value: int) -> Ciphertext:
        self._check_range(value)
        return self._store("constant", CiphertextType.EUINT64, int(value))

    def verify_and_import(
        self,
        external: ExternalCiphertext,
        proof: Proof,
        expected_submitter: str,
    ) -> Ciphertext:
        submitter = normalize_principal(expected_submitter)
        key = external.handle.value

        if key in self._consumed:
            raise InvalidProofError(submitter, "proof already consumed")
        entry = self._inputs.get(key)
        if entry is None:
            raise InvalidProofError(submitter, "unknown input ciphertext")
        ciphertext_type, value = entry
        if ciphertext_type != external.ciphertext_type:
            raise InvalidProofError(submitter, "ciphertext type mismatch")
        if submitter is None:
            raise InvalidProofError(submitter, "no submitter to bind to")

        expected = self._proof_for(external.handle, ciphertext_type, submitter)
        if not hmac.compare_digest(expected, proof.data):
            raise InvalidProofError(submitter, "proof does not bind input to submitter")

        del self._inputs[key]
        self._consumed.add(key)
        self._cleartexts[key] = (ciphertext_type, value)
        self._acl[key] = set()
        return Ciphertext(handle=external.handle, ciphertext_type=ciphertext_type)

    def add(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        left = self._lookup(a, CiphertextType.EUINT64)
        right = self._lookup(b, CiphertextType.EUINT64)
        return self._store("add", CiphertextType.EUINT64, (left + right) & UINT64_MAX)

    def greater_or_equal(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        left = self._lookup(a, CiphertextType.EUINT64)
        right = self._lookup(b, CiphertextType.EUINT64)
        return self._store("ge", CiphertextType.EBOOL, left >= right)

    def tag_for_internal_use(self, ciphertext: Ciphertext) -> None:
        self._grant(ciphertext, AccessTag.STORE.value)

    def tag_for_public_decryption(self, ciphertext: Ciphertext) -> None:
        self._grant(ciphertext, AccessTag.PUBLIC.value)

    def tag_for_principal(self, ciphertext: Ciphertext, principal: str) -> None:
        consumer = normalize_principal(principal)
        if consumer is None:
            raise ValueError("Cannot grant access to the null principal")
        if is_reserved_principal(consumer):
            raise ValueError(f"Cannot grant access to reserved name {consumer!r}")
        self._grant(ciphertext, consumer)

    def handle_of(self, ciphertext: Ciphertext) -> CiphertextHandle:
        if ciphertext.handle.value not in self._cleartexts:
            raise ValueError(f"Unknown ciphertext {ciphertext.handle.hex()}")
        return ciphertext.handle

    # =========================================================================
    # DecryptionAuthorityInterface
    # =========================================================================

    def access_tags(self, handle: CiphertextHandle) -> AccessTagSet:
        """Current ACL of a handle as seen by the authority."""
        acl = self._acl.get(handle.value)
        if acl is None:
            raise UnknownHandleError(handle)
        return AccessTagSet(handle=handle, consumers=frozenset(acl))

    def _release(self, handle: CiphertextHandle, requester: str) -> ClearValue:
        entry = self._cleartexts.get(handle.value)
        if entry is None:
            raise UnknownHandleError(handle)

        seen = self._decrypt_requests.get(handle.value, 0)
        self._decrypt_requests[handle.value] = seen + 1
        if seen < self._pending_rounds:
            raise DecryptionPendingError(handle)

        if not self.access_tags(handle).allows(requester):
            raise DecryptionDeniedError(handle, requester)
        return entry[1]

    def public_decrypt(self, handles: list[CiphertextHandle]) -> dict[str, ClearValue]:
        return {
            handle.hex(): self._release(handle, AccessTag.PUBLIC.value)
            for handle in handles
        }

    def user_decrypt(self, handle: CiphertextHandle, principal: str) -> ClearValue:
        requester = normalize_principal(principal)
        if requester is None or is_reserved_principal(requester):
            raise DecryptionDeniedError(handle, str(principal))
        return self._release(handle, requester)
