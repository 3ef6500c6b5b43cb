"""
Ledger State Context

The persisted state of the ledger, held in one explicit object rather
than module globals:
- the spending limit (always defined)
- the per-principal totals (created lazily, never removed)

All writes go through a LedgerTransaction. A transaction stages its writes
and applies them in one step when the command completes; if the command
raises, the staged writes are discarded and the state is untouched. This
is what makes lazy initialization safe: a zero total created by
get-or-insert only survives if the whole command succeeds.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from pydantic import BaseModel, ConfigDict

from confidential_ledger.models.ciphertext import Ciphertext, CiphertextHandle


class LedgerSnapshot(BaseModel):
    """Handles of every stored ciphertext at one point in time."""
    model_config = ConfigDict(frozen=True)

    spending_limit: CiphertextHandle
    totals: dict[str, CiphertextHandle]


class LedgerState:
    """Spending limit and user totals."""

    def __init__(self, spending_limit: Ciphertext):
        self._spending_limit = spending_limit
        self._totals: dict[str, Ciphertext] = {}
        self._open: Optional["LedgerTransaction"] = None

    @property
    def spending_limit(self) -> Ciphertext:
        return self._spending_limit

    def get_total(self, principal: str) -> Optional[Ciphertext]:
        return self._totals.get(principal)

    def has_total(self, principal: str) -> bool:
        return principal in self._totals

    def principals(self) -> list[str]:
        return list(self._totals)

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            spending_limit=self._spending_limit.handle,
            totals={p: ct.handle for p, ct in self._totals.items()},
        )

    @contextmanager
    def transaction(self) -> Iterator["LedgerTransaction"]:
        """
        Open a transaction for one command.

        Commits on normal exit, discards on exception.
        """
        if self._open is not None:
            raise RuntimeError("A ledger transaction is already open")
        tx = LedgerTransaction(self)
        self._open = tx
        try:
            yield tx
            tx._apply()
        finally:
            self._open = None

    def _commit(
        self,
        spending_limit: Optional[Ciphertext],
        totals: dict[str, Ciphertext],
    ) -> None:
        if spending_limit is not None:
            self._spending_limit = spending_limit
        self._totals.update(totals)


class LedgerTransaction:
    """Staged writes of one command; reads see staged values first."""

    def __init__(self, state: LedgerState):
        self._state = state
        self._limit: Optional[Ciphertext] = None
        self._totals: dict[str, Ciphertext] = {}

    @property
    def spending_limit(self) -> Ciphertext:
        if self._limit is not None:
            return self._limit
        return self._state.spending_limit

    def set_spending_limit(self, ciphertext: Ciphertext) -> None:
        self._limit = ciphertext

    def get_total(self, principal: str) -> Optional[Ciphertext]:
        if principal in self._totals:
            return self._totals[principal]
        return self._state.get_total(principal)

    def get_or_insert_total(
        self,
        principal: str,
        default: Callable[[], Ciphertext],
    ) -> Ciphertext:
        """Current total of principal, staging default() if there is none."""
        total = self.get_total(principal)
        if total is None:
            total = default()
            self._totals[principal] = total
        return total

    def set_total(self, principal: str, ciphertext: Ciphertext) -> None:
        self._totals[principal] = ciphertext

    def _apply(self) -> None:
        self._state._commit(self._limit, self._totals)
