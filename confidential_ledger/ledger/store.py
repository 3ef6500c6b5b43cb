"""
Encrypted Ledger Store

The confidential expense ledger: one encrypted spending limit set by the
owner, one encrypted running total per principal, and an encrypted
comparison between the two.

CRITICAL BOUNDARIES:
1. The store never sees a plaintext. Amounts arrive as proven external
   ciphertexts, totals are combined homomorphically, comparisons return
   encrypted booleans.
2. Every handle that leaves the store has been tagged for the way it is
   meant to be decrypted.
3. Every command is atomic. State changes are staged in a transaction and
   applied only if the whole command succeeds.
4. Every command runs under the reentrancy lock, including the ones that
   look like getters: they widen decryption permissions, so they are
   commands, not queries.

Command flow:
    lock → authorization → verify / compute → tag → commit → event → unlock
"""

import functools
from typing import Optional
from uuid import UUID

import structlog

from confidential_ledger.access import AccessController, ReentrancyLock
from confidential_ledger.config import TotalsExposure
from confidential_ledger.errors import InvalidArgumentError, LedgerError
from confidential_ledger.events import EventNotifier
from confidential_ledger.ledger.state import LedgerSnapshot, LedgerState
from confidential_ledger.ledger.tagger import PermissionTagger
from confidential_ledger.models.ciphertext import (
    AccessTagSet,
    Ciphertext,
    CiphertextHandle,
    CiphertextType,
    ExternalCiphertext,
    Proof,
    is_reserved_principal,
    normalize_principal,
)
from confidential_ledger.services.fhe import EncryptedArithmeticService


logger = structlog.get_logger(__name__)


def ledger_command(method):
    """Run a store method under the reentrancy lock and log rejections."""
    operation = method.__name__

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            with self._lock.guard(operation):
                return method(self, *args, **kwargs)
        except LedgerError as e:
            if e.operation is None:
                e.operation = operation
            logger.warning(
                "operation_rejected",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

    return wrapper


def _require_principal(value: Optional[str], argument: str) -> str:
    principal = normalize_principal(value)
    if principal is None or is_reserved_principal(principal):
        raise InvalidArgumentError(argument, value)
    return principal


def _optional_caller(value: Optional[str]) -> Optional[str]:
    """Callers of the exposing commands may be anonymous, but never a tag name."""
    if is_reserved_principal(value):
        raise InvalidArgumentError("caller", value)
    return normalize_principal(value)


def _require_amount(external: ExternalCiphertext) -> None:
    # Limits and expenses are always euint64
    if external.ciphertext_type != CiphertextType.EUINT64:
        raise InvalidArgumentError("external", external.ciphertext_type.value)


class EncryptedLedgerStore:
    """
    Encrypted spending ledger.

    Every command takes the calling principal as its first argument.
    An optional correlation_id is copied onto the emitted event.
    """

    def __init__(
        self,
        service: EncryptedArithmeticService,
        initial_owner: str,
        notifier: Optional[EventNotifier] = None,
        exposure: TotalsExposure = TotalsExposure.PUBLIC,
    ):
        """
        Initialize the ledger.

        Args:
            service: Encrypted arithmetic capability
            initial_owner: Principal allowed to set the limit and reset totals
            notifier: Event notifier. A local-only one is created if None.
            exposure: How user totals are exposed when their handle is handed out
        """
        self._service = service
        self._access = AccessController(initial_owner)
        self._lock = ReentrancyLock()
        self._tagger = PermissionTagger(service, exposure)
        self._notifier = notifier or EventNotifier()
        self._state = LedgerState(self._fresh_zero())

    # =========================================================================
    # Inspection (no tagging, no plaintext)
    # =========================================================================

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def exposure(self) -> TotalsExposure:
        return self._tagger.exposure

    @property
    def is_busy(self) -> bool:
        return self._lock.locked

    def has_total(self, principal: str) -> bool:
        return self._state.has_total(normalize_principal(principal))

    def principals(self) -> list[str]:
        """Principals that have a total entry."""
        return self._state.principals()

    def snapshot(self) -> LedgerSnapshot:
        return self._state.snapshot()

    def access_tags(self, handle: CiphertextHandle) -> AccessTagSet:
        return self._tagger.tags_of(handle)

    # =========================================================================
    # Internals
    # =========================================================================

    def _fresh_zero(self) -> Ciphertext:
        return self._tagger.retain(self._service.encrypt_constant(0))

    # =========================================================================
    # Owner commands
    # =========================================================================

    @ledger_command
    def set_limit(
        self,
        caller: str,
        external: ExternalCiphertext,
        proof: Proof,
        correlation_id: Optional[UUID] = None,
    ) -> CiphertextHandle:
        """
        Replace the spending limit with a proven encrypted value.

        Raises:
            UnauthorizedError: If caller is not the owner
            InvalidProofError: If the proof does not bind the input to caller
            InvalidArgumentError: If the input is not a euint64
        """
        self._access.require_owner(caller, "set_limit")
        _require_amount(external)
        owner = self._access.owner

        with self._state.transaction() as tx:
            limit = self._service.verify_and_import(external, proof, owner)
            handle = self._tagger.tag(limit, internal=True, public=True)
            tx.set_spending_limit(limit)

        logger.info("limit_updated", owner=owner, handle=handle.hex())
        self._notifier.limit_updated(handle, correlation_id)
        return handle

    @ledger_command
    def reset_user_expenses(
        self,
        caller: str,
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Overwrite a principal's total with a fresh encrypted zero.

        Raises:
            UnauthorizedError: If caller is not the owner
            InvalidArgumentError: If principal is null or a reserved tag name
        """
        self._access.require_owner(caller, "reset_user_expenses")
        target = _require_principal(principal, "principal")

        with self._state.transaction() as tx:
            zero = self._fresh_zero()
            self._tagger.expose_total(zero, target)
            tx.set_total(target, zero)

        logger.info("expenses_reset", principal=target)
        self._notifier.expenses_reset(target, correlation_id)

    @ledger_command
    def transfer_ownership(
        self,
        caller: str,
        new_owner: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Raises:
            UnauthorizedError: If caller is not the owner
            InvalidArgumentError: If new_owner is null
        """
        previous = self._access.transfer_ownership(caller, new_owner)
        current = self._access.owner

        logger.info("ownership_transferred", previous_owner=previous, new_owner=current)
        self._notifier.ownership_transferred(previous, current, correlation_id)

    # =========================================================================
    # Principal commands
    # =========================================================================

    @ledger_command
    def record_expense(
        self,
        caller: str,
        external: ExternalCiphertext,
        proof: Proof,
        correlation_id: Optional[UUID] = None,
    ) -> CiphertextHandle:
        """
        Add a proven encrypted amount to the caller's total.

        The caller's total is created as encrypted zero on first use, in
        the same transaction; a rejected proof leaves no entry behind.

        Raises:
            InvalidProofError: If the proof does not bind the input to caller
            InvalidArgumentError: If caller is null or the input is not a euint64
        """
        submitter = _require_principal(caller, "caller")
        _require_amount(external)

        with self._state.transaction() as tx:
            amount = self._service.verify_and_import(external, proof, submitter)
            current = tx.get_or_insert_total(submitter, self._fresh_zero)
            total = self._tagger.retain(self._service.add(current, amount))
            handle = self._tagger.expose_total(total, submitter)
            tx.set_total(submitter, total)

        logger.info("expense_recorded", principal=submitter, handle=handle.hex())
        self._notifier.expense_recorded(submitter, handle, correlation_id)
        return handle

    @ledger_command
    def get_total_expenses(
        self,
        caller: Optional[str],
        principal: str,
    ) -> CiphertextHandle:
        """
        Hand out the handle of a principal's total.

        NOT a pure query: every call (re-)tags the total for decryption
        according to the exposure mode, regardless of who the caller is,
        and creates the zero total if the principal has none yet.
        """
        reader = _optional_caller(caller)
        target = _require_principal(principal, "principal")

        with self._state.transaction() as tx:
            total = tx.get_or_insert_total(target, self._fresh_zero)
            handle = self._tagger.expose_total(total, reader, target)

        logger.info("total_exposed", principal=target, caller=reader, handle=handle.hex())
        return handle

    @ledger_command
    def get_total_exceeds_limit(
        self,
        caller: Optional[str],
        principal: str,
        correlation_id: Optional[UUID] = None,
    ) -> CiphertextHandle:
        """
        Encrypted `total >= limit` for a principal (equality counts as exceeding).

        The encrypted boolean is tagged publicly decryptable.
        """
        reader = _optional_caller(caller)
        target = _require_principal(principal, "principal")

        with self._state.transaction() as tx:
            total = tx.get_or_insert_total(target, self._fresh_zero)
            exceeded = self._service.greater_or_equal(total, tx.spending_limit)
            handle = self._tagger.tag(exceeded, internal=True, public=True)

        logger.info("expenses_checked", principal=target, caller=reader, handle=handle.hex())
        self._notifier.expenses_checked(target, handle, correlation_id)
        return handle

    @ledger_command
    def get_spending_limit(self, caller: Optional[str] = None) -> CiphertextHandle:
        """
        Hand out the handle of the spending limit, tagging it public.

        NOT a pure query: it widens decryption permission on the limit.
        """
        reader = _optional_caller(caller)
        limit = self._state.spending_limit
        handle = self._tagger.tag(limit, public=True)

        logger.info("limit_exposed", caller=reader, handle=handle.hex())
        return handle
