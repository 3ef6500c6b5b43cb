"""
Shared fixtures for the confidential ledger tests.

Test strategy:
1. Unit tests for individual components (access, state, tagger, backend)
2. Ledger command tests against the in-process FHE backend
3. Property tests for the algebraic guarantees
4. No real FHE coprocessor or network in tests
"""

import pytest

from confidential_ledger.config import TotalsExposure, get_settings
from confidential_ledger.events import EventNotifier
from confidential_ledger.ledger import EncryptedLedgerStore
from confidential_ledger.orchestrator import ConfidentialExpenseFlow
from confidential_ledger.services.decryption import DecryptionClient
from confidential_ledger.services.fhe import MockFHEBackend
from confidential_ledger.services.storage import InMemoryEventStorage

from tests.helpers import OWNER, no_wait_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend() -> MockFHEBackend:
    return MockFHEBackend(secret=b"test-secret")


@pytest.fixture
def event_storage() -> InMemoryEventStorage:
    return InMemoryEventStorage()


@pytest.fixture
def notifier(event_storage) -> EventNotifier:
    return EventNotifier(event_storage)


@pytest.fixture
def ledger(backend, notifier) -> EncryptedLedgerStore:
    return EncryptedLedgerStore(backend, OWNER, notifier)


@pytest.fixture
def caller_scoped_ledger(backend, notifier) -> EncryptedLedgerStore:
    return EncryptedLedgerStore(
        backend, OWNER, notifier, exposure=TotalsExposure.CALLER
    )


@pytest.fixture
def decryption(backend) -> DecryptionClient:
    return DecryptionClient(backend, no_wait_settings())


@pytest.fixture
def flow(ledger, backend, decryption) -> ConfidentialExpenseFlow:
    return ConfidentialExpenseFlow(ledger, backend, decryption)
