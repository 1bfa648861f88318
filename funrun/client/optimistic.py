"""
Optimistic mutations: show the proposed value at once, confirm it remotely,
then keep it or put the original back.

Each entity id has its own little state machine:

    IDLE --propose--> PENDING --ok-----> CONFIRMED
                              --error--> ROLLED_BACK

At most one mutation per id may be PENDING. Ids never share state, so
proposals for different ids run concurrently and finish in any order.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Confirm = Callable[[Hashable, Any], Awaitable[Any]]
DisplayListener = Callable[[Hashable, Any], None]


class MutationState(str, Enum):
    IDLE = "IDLE"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ROLLED_BACK = "ROLLED_BACK"


class MutationInFlight(RuntimeError):
    """
    propose() was called for an id that already has a pending mutation.
    """


@dataclass
class PendingMutation(Generic[V]):
    entity_id: Hashable
    original: V
    proposed: V
    state: MutationState = MutationState.PENDING

    @property
    def in_flight(self) -> bool:
        return self.state is MutationState.PENDING


@dataclass(frozen=True)
class Outcome(Generic[V]):
    entity_id: Hashable
    state: MutationState
    value: V

    @property
    def confirmed(self) -> bool:
        return self.state is MutationState.CONFIRMED


class OptimisticController(Generic[V]):
    def __init__(self, on_display: Optional[DisplayListener] = None) -> None:
        self._on_display = on_display
        self._pending: Dict[Hashable, PendingMutation[V]] = {}
        self._displayed: Dict[Hashable, V] = {}
        self._last: Dict[Hashable, Outcome[V]] = {}

    def _show(self, entity_id: Hashable, value: V) -> None:
        self._displayed[entity_id] = value
        if self._on_display is not None:
            self._on_display(entity_id, value)

    def is_pending(self, entity_id: Hashable) -> bool:
        return entity_id in self._pending

    def state(self, entity_id: Hashable) -> MutationState:
        if entity_id in self._pending:
            return MutationState.PENDING
        last = self._last.get(entity_id)
        return last.state if last else MutationState.IDLE

    def displayed(self, entity_id: Hashable, default: Optional[V] = None) -> Optional[V]:
        return self._displayed.get(entity_id, default)

    def last_outcome(self, entity_id: Hashable) -> Optional[Outcome[V]]:
        return self._last.get(entity_id)

    async def propose(self, entity_id: Hashable, original: V, target: V, confirm: Confirm) -> Outcome[V]:
        """
        Display target immediately, then await confirm(entity_id, target) once.

        Returns a CONFIRMED outcome. If confirm raises, the original value is
        displayed again and the exception propagates to the caller.
        """
        if target == original:
            raise ValueError(f"no-op mutation for {entity_id!r}: value is already {target!r}")
        if entity_id in self._pending:
            raise MutationInFlight(f"mutation already in flight for {entity_id!r}")

        pm: PendingMutation[V] = PendingMutation(entity_id, original, target)
        self._pending[entity_id] = pm
        try:
            self._show(entity_id, target)
            await confirm(entity_id, target)
        except BaseException:
            pm.state = MutationState.ROLLED_BACK
            self._last[entity_id] = Outcome(entity_id, MutationState.ROLLED_BACK, original)
            self._show(entity_id, original)
            logger.warning("Rolled back %r to %r", entity_id, original)
            raise
        finally:
            del self._pending[entity_id]

        pm.state = MutationState.CONFIRMED
        outcome = Outcome(entity_id, MutationState.CONFIRMED, target)
        self._last[entity_id] = outcome
        return outcome
