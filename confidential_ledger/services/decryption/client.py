"""
Decryption Client

Thin client over a decryption authority with retry logic.

DESIGN DECISION: Retries live HERE, at the external boundary, and only
for the transient "pending" condition. A denied or unknown handle is a
definitive answer and is raised immediately. The ledger core never
retries anything.
"""

from typing import Optional

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from confidential_ledger.config import DecryptionSettings, get_settings
from confidential_ledger.models.ciphertext import CiphertextHandle
from confidential_ledger.services.decryption.interface import (
    ClearValue,
    DecryptionAuthorityInterface,
    DecryptionPendingError,
)


logger = structlog.get_logger(__name__)


class DecryptionClient:
    """
    Resolves ledger handles to values through the decryption authority.

    Used by clients (and tests) after a ledger command returned a handle.
    """

    def __init__(
        self,
        authority: DecryptionAuthorityInterface,
        settings: Optional[DecryptionSettings] = None,
    ):
        self._authority = authority
        self._settings = settings or get_settings().decryption
        self._retrying = Retrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(
                multiplier=self._settings.wait_multiplier,
                min=self._settings.wait_min_seconds,
                max=self._settings.wait_max_seconds,
            ),
            retry=retry_if_exception_type(DecryptionPendingError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state) -> None:
        logger.info(
            "decryption_pending_retry",
            attempt=retry_state.attempt_number,
        )

    def public_decrypt_many(
        self,
        handles: list[CiphertextHandle],
    ) -> dict[str, ClearValue]:
        """Decrypt a batch of public handles, keyed by handle hex."""
        if not handles:
            return {}
        return self._retrying(self._authority.public_decrypt, list(handles))

    def public_decrypt(self, handle: CiphertextHandle) -> ClearValue:
        """Decrypt one public handle."""
        return self.public_decrypt_many([handle])[handle.hex()]

    def user_decrypt(self, handle: CiphertextHandle, principal: str) -> ClearValue:
        """Decrypt a handle the principal was granted access to."""
        return self._retrying(self._authority.user_decrypt, handle, principal)
