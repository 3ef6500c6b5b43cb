"""
Permission Tagger

Attaches decryption permissions to ciphertexts and keeps a record of
what was granted, per handle.

Invoked whenever the ledger produces a ciphertext it will keep (internal
tag) and whenever it hands a handle to the outside (public tag or
principal grant). Tags only ever widen: there is no way to revoke one,
a narrower exposure requires a new ciphertext.
"""

from typing import Iterable, Optional

from confidential_ledger.config import TotalsExposure
from confidential_ledger.models.ciphertext import (
    AccessTag,
    AccessTagSet,
    Ciphertext,
    CiphertextHandle,
    is_reserved_principal,
    normalize_principal,
)
from confidential_ledger.services.fhe import EncryptedArithmeticService


class PermissionTagger:
    """Applies and records access tags through the arithmetic service."""

    def __init__(
        self,
        service: EncryptedArithmeticService,
        exposure: TotalsExposure = TotalsExposure.PUBLIC,
    ):
        self._service = service
        self._exposure = exposure
        self._records: dict[bytes, set[str]] = {}

    @property
    def exposure(self) -> TotalsExposure:
        return self._exposure

    def _record(self, ciphertext: Ciphertext, consumer: str) -> None:
        self._records.setdefault(ciphertext.handle.value, set()).add(consumer)

    def tag(
        self,
        ciphertext: Ciphertext,
        internal: bool = False,
        public: bool = False,
        principals: Iterable[Optional[str]] = (),
    ) -> CiphertextHandle:
        """
        Grant the requested consumers and return the handle.

        Null principals in `principals` are skipped. A principal named after
        a well-known tag is refused with ValueError.
        """
        if internal:
            self._service.tag_for_internal_use(ciphertext)
            self._record(ciphertext, AccessTag.STORE.value)
        if public:
            self._service.tag_for_public_decryption(ciphertext)
            self._record(ciphertext, AccessTag.PUBLIC.value)
        for principal in principals:
            consumer = normalize_principal(principal)
            if consumer is None:
                continue
            if is_reserved_principal(consumer):
                raise ValueError(f"Cannot grant access to reserved name {consumer!r}")
            self._service.tag_for_principal(ciphertext, consumer)
            self._record(ciphertext, consumer)
        return self._service.handle_of(ciphertext)

    def retain(self, ciphertext: Ciphertext) -> Ciphertext:
        """Tag for internal use; returns the ciphertext for chaining."""
        self.tag(ciphertext, internal=True)
        return ciphertext

    def expose_total(
        self,
        ciphertext: Ciphertext,
        *readers: Optional[str],
    ) -> CiphertextHandle:
        """
        Expose a user total according to the configured exposure mode.

        PUBLIC: the total becomes publicly decryptable.
        CALLER: each reader is granted access; nothing becomes public.
        """
        if self._exposure == TotalsExposure.PUBLIC:
            return self.tag(ciphertext, public=True)
        return self.tag(ciphertext, principals=readers)

    def tags_of(self, handle: CiphertextHandle) -> AccessTagSet:
        """Everything this tagger ever granted on a handle."""
        return AccessTagSet(
            handle=handle,
            consumers=frozenset(self._records.get(handle.value, set())),
        )
