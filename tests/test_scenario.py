"""
End-to-end tests through the application factory.

These walk the whole path a client takes: encrypt with proof, submit,
receive a handle, decrypt through the authority with retries.
"""

import pytest

from confidential_ledger.config import LedgerSettings, TotalsExposure
from confidential_ledger.errors import UnauthorizedError
from confidential_ledger.events import create_correlation_id
from confidential_ledger.models import CiphertextHandle, LedgerEventType
from confidential_ledger.orchestrator import create_app_components
from confidential_ledger.services.decryption import DecryptionDeniedError
from confidential_ledger.services.fhe import MockFHEBackend
from confidential_ledger.services.storage import JsonLinesEventStorage

from tests.helpers import ALICE, OWNER, no_wait_settings


def _components(backend=None, **ledger_kwargs):
    return create_app_components(
        backend=backend or MockFHEBackend(secret=b"scenario"),
        ledger_settings=LedgerSettings(initial_owner=OWNER, **ledger_kwargs),
        decryption_settings=no_wait_settings(),
    )


class TestExpenseScenario:
    """The limit / record / check / reset walkthrough."""

    def test_full_walkthrough(self):
        ledger, flow, notifier = _components()

        flow.set_limit(OWNER, 100)
        assert flow.spending_limit() == 100

        flow.record_expense(ALICE, 60)
        assert flow.total_of(ALICE) == 60
        assert flow.exceeds_limit(ALICE) is False

        flow.record_expense(ALICE, 50)
        assert flow.total_of(ALICE) == 110
        assert flow.exceeds_limit(ALICE) is True

        flow.reset_expenses(OWNER, ALICE)
        assert flow.total_of(ALICE) == 0
        assert flow.exceeds_limit(ALICE) is False

        event_types = [e.event_type for e in reversed(notifier.storage.get_recent_events())]
        assert event_types == [
            LedgerEventType.LIMIT_UPDATED,
            LedgerEventType.EXPENSE_RECORDED,
            LedgerEventType.EXPENSES_CHECKED,
            LedgerEventType.EXPENSE_RECORDED,
            LedgerEventType.EXPENSES_CHECKED,
            LedgerEventType.EXPENSES_RESET,
            LedgerEventType.EXPENSES_CHECKED,
        ]

    def test_shared_correlation_id(self):
        ledger, flow, notifier = _components()
        cid = create_correlation_id()

        flow.record_expense(ALICE, 10, cid)
        flow.exceeds_limit(ALICE, correlation_id=cid)

        events = notifier.storage.get_events_by_principal(ALICE)
        assert [e.correlation_id for e in events] == [cid, cid]

    def test_event_handles_decrypt(self):
        """A client can follow the handle carried by an event."""
        ledger, flow, notifier = _components()

        flow.record_expense(ALICE, 25)
        event = notifier.storage.get_recent_events()[0]

        assert flow.reveal(CiphertextHandle.from_hex(event.handle)) == 25

    def test_non_owner_cannot_set_limit(self):
        ledger, flow, notifier = _components()
        with pytest.raises(UnauthorizedError):
            flow.set_limit(ALICE, 1)
        assert flow.spending_limit() == 0

    def test_slow_authority(self):
        ledger, flow, notifier = _components(MockFHEBackend(pending_rounds=2))
        flow.set_limit(OWNER, 40)
        assert flow.spending_limit() == 40

    def test_spending_limit_with_reader_is_public(self):
        ledger, flow, notifier = _components(totals_exposure=TotalsExposure.CALLER)
        flow.set_limit(OWNER, 70)
        assert flow.spending_limit(reader=ALICE) == 70
        assert ledger.access_tags(ledger.snapshot().spending_limit).is_public


class TestCallerScopedScenario:

    def test_totals_private_to_readers(self):
        ledger, flow, notifier = _components(totals_exposure=TotalsExposure.CALLER)

        flow.record_expense(ALICE, 60)

        assert flow.total_of(ALICE, reader=ALICE) == 60
        with pytest.raises(DecryptionDeniedError):
            flow.total_of(ALICE)
        # Comparison results stay public
        assert flow.exceeds_limit(ALICE) is True


class TestFactory:

    def test_json_lines_event_log(self, tmp_path):
        path = tmp_path / "ledger.jsonl"
        ledger, flow, notifier = _components(event_log_path=str(path))

        flow.record_expense(ALICE, 5)

        assert isinstance(notifier.storage, JsonLinesEventStorage)
        assert len(JsonLinesEventStorage(path).get_events_by_principal(ALICE)) == 1

    def test_backend_without_authority_rejected(self):
        class ArithmeticOnly:
            pass

        with pytest.raises(ValueError):
            create_app_components(
                backend=ArithmeticOnly(),
                ledger_settings=LedgerSettings(initial_owner=OWNER),
                decryption_settings=no_wait_settings(),
            )

    def test_owner_from_settings(self):
        ledger, flow, notifier = _components()
        assert ledger.owner == OWNER
        assert ledger.exposure == TotalsExposure.PUBLIC
