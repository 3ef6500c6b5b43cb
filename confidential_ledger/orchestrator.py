"""
Main Orchestrator for the Confidential Ledger

This module ties the components together and defines the client-side
flow around the ledger:
    value → encrypt with proof → ledger command → handle → decrypt

DESIGN DECISION: The orchestrator stands where a wallet or backend
service would. It is the only place where plaintexts and handles meet,
and it never hands a plaintext to the ledger. The ledger sees proven
ciphertexts; the orchestrator sees values only after the decryption
authority released them according to the ledger's access tags.
"""

from typing import Optional
from uuid import UUID

from confidential_ledger.config import (
    DecryptionSettings,
    LedgerSettings,
    get_settings,
)
from confidential_ledger.events import (
    EventNotifier,
    configure_logging,
    create_correlation_id,
)
from confidential_ledger.ledger import EncryptedLedgerStore
from confidential_ledger.models.ciphertext import CiphertextHandle
from confidential_ledger.services.decryption import (
    DecryptionAuthorityInterface,
    DecryptionClient,
)
from confidential_ledger.services.fhe import (
    EncryptedArithmeticService,
    InputEncryptor,
    MockFHEBackend,
)
from confidential_ledger.services.storage import (
    EventStorageInterface,
    InMemoryEventStorage,
    JsonLinesEventStorage,
)


class ConfidentialExpenseFlow:
    """
    Client-side flows over the encrypted ledger.

    Flow for a submission:
    1. Encrypt → the submitter's encryptor produces ciphertext + proof
    2. Submit → ledger command with the submitter as caller
    3. Handle → returned by the ledger (and carried by its event)
    4. Decrypt → the authority releases the value if the tags allow it

    All commands of one call share a correlation ID.
    """

    def __init__(
        self,
        ledger: EncryptedLedgerStore,
        encryptor: InputEncryptor,
        decryption: DecryptionClient,
    ):
        self._ledger = ledger
        self._encryptor = encryptor
        self._decryption = decryption

    @property
    def ledger(self) -> EncryptedLedgerStore:
        return self._ledger

    def reveal(self, handle: CiphertextHandle, reader: Optional[str] = None):
        """
        Decrypt a handle.

        Without a reader the handle must be publicly decryptable; with a
        reader, the reader's own grant (or a public tag) is used.
        """
        if reader is None:
            return self._decryption.public_decrypt(handle)
        return self._decryption.user_decrypt(handle, reader)

    def set_limit(
        self,
        owner: str,
        amount: int,
        correlation_id: Optional[UUID] = None,
    ) -> CiphertextHandle:
        """Encrypt amount as the owner and install it as the spending limit."""
        correlation_id = correlation_id or create_correlation_id()
        external, proof = self._encryptor.encrypt_input(amount, owner)
        return self._ledger.set_limit(owner, external, proof, correlation_id)

    def record_expense(
        self,
        principal: str,
        amount: int,
        correlation_id: Optional[UUID] = None,
    ) -> CiphertextHandle:
        """Encrypt amount as principal and add it to principal's total."""
        correlation_id = correlation_id or create_correlation_id()
        external, proof = self._encryptor.encrypt_input(amount, principal)
        return self._ledger.record_expense(principal, external, proof, correlation_id)

    def reset_expenses(
        self,
        owner: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Reset principal's total to a fresh encrypted zero, as the owner."""
        correlation_id = correlation_id or create_correlation_id()
        self._ledger.reset_user_expenses(owner, principal, correlation_id)

    def total_of(self, principal: str, reader: Optional[str] = None) -> int:
        """Decrypted total of principal, read by reader (public if None)."""
        handle = self._ledger.get_total_expenses(reader, principal)
        return self.reveal(handle, reader)

    def spending_limit(self, reader: Optional[str] = None) -> int:
        """
        Decrypted spending limit.

        The ledger always tags the limit public, so it is decrypted publicly.
        reader only identifies the caller to the ledger command.
        """
        handle = self._ledger.get_spending_limit(reader)
        return self.reveal(handle)

    def exceeds_limit(
        self,
        principal: str,
        reader: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Decrypted result of the encrypted total >= limit comparison."""
        correlation_id = correlation_id or create_correlation_id()
        handle = self._ledger.get_total_exceeds_limit(reader, principal, correlation_id)
        return self.reveal(handle)


def create_event_storage(ledger_settings: LedgerSettings) -> EventStorageInterface:
    """JSON-lines storage when a path is configured, in-memory otherwise."""
    if ledger_settings.event_log_path:
        return JsonLinesEventStorage(ledger_settings.event_log_path)
    return InMemoryEventStorage()


def create_app_components(
    backend: Optional[EncryptedArithmeticService] = None,
    ledger_settings: Optional[LedgerSettings] = None,
    decryption_settings: Optional[DecryptionSettings] = None,
    authority: Optional[DecryptionAuthorityInterface] = None,
    encryptor: Optional[InputEncryptor] = None,
) -> tuple[EncryptedLedgerStore, ConfidentialExpenseFlow, EventNotifier]:
    """
    Factory function to create all application components.

    Args:
        backend: Encrypted arithmetic capability. Defaults to the
                 in-process MockFHEBackend.
        ledger_settings: Defaults to LEDGER_* environment settings.
        decryption_settings: Defaults to DECRYPTION_* environment settings.
        authority: Decryption authority. Defaults to the backend when it
                   is one.
        encryptor: Client-side encryptor. Defaults to the backend when it
                   is one.

    Returns:
        (ledger, expense_flow, notifier)
    """
    settings = get_settings()
    ledger_settings = ledger_settings or settings.ledger
    decryption_settings = decryption_settings or settings.decryption
    configure_logging(settings.app.log_level)

    backend = backend or MockFHEBackend()
    if authority is None:
        if not isinstance(backend, DecryptionAuthorityInterface):
            raise ValueError("A decryption authority is required for this backend")
        authority = backend
    if encryptor is None:
        if not isinstance(backend, InputEncryptor):
            raise ValueError("An input encryptor is required for this backend")
        encryptor = backend

    notifier = EventNotifier(create_event_storage(ledger_settings))
    ledger = EncryptedLedgerStore(
        service=backend,
        initial_owner=ledger_settings.initial_owner,
        notifier=notifier,
        exposure=ledger_settings.totals_exposure,
    )
    flow = ConfidentialExpenseFlow(
        ledger=ledger,
        encryptor=encryptor,
        decryption=DecryptionClient(authority, decryption_settings),
    )

    return ledger, flow, notifier
