# participant collection + payment tally, kept in sync without refetching
from collections import OrderedDict
from datetime import datetime
from typing import Dict, Iterable, Iterator, Optional

from ..models import Participant, PaymentStatus


class UnknownParticipant(AssertionError):
    pass


class ParticipantBoard:
    """
    Client-side view of the registrant list.

    collection[id] = Participant, in the order the server returned them.
    tally[status] = number of participants with that payment status.

    Invariant: sum(tally.values()) == len(collection).
    """

    def __init__(self) -> None:
        self.collection: "OrderedDict[str, Participant]" = OrderedDict()
        self.tally: Dict[PaymentStatus, int] = self._empty_tally()

    @staticmethod
    def _empty_tally() -> Dict[PaymentStatus, int]:
        return {status: 0 for status in PaymentStatus}

    def load(self, participants: Iterable[Participant]) -> None:
        """
        Replace everything and recount from scratch.
        """
        collection: "OrderedDict[str, Participant]" = OrderedDict()
        for p in participants:
            collection[p.id] = p
        tally = self._empty_tally()
        for p in collection.values():
            tally[p.payment_status] += 1
        self.collection = collection
        self.tally = tally

    def apply_confirmed_mutation(
        self,
        participant_id: str,
        new_status: PaymentStatus,
        updated_at: Optional[datetime] = None,
    ) -> Participant:
        """
        Record a server-confirmed payment change. Moves one count from the
        old bucket to the new one; never recounts the collection.
        """
        current = self.collection.get(participant_id)
        if current is None:
            raise UnknownParticipant(f"participant {participant_id!r} is not on the board")

        new_status = PaymentStatus(new_status)
        old_status = current.payment_status
        if new_status is old_status:
            return current

        # assigning to an existing key keeps its position in an OrderedDict
        changes: Dict[str, object] = {"payment_status": new_status}
        if updated_at is not None:
            changes["updated_at"] = updated_at
        updated = current.model_copy(update=changes)
        self.collection[participant_id] = updated
        self.tally[old_status] -= 1
        self.tally[new_status] += 1

        assert sum(self.tally.values()) == len(self.collection), self.tally
        return updated

    def get(self, participant_id: str) -> Optional[Participant]:
        return self.collection.get(participant_id)

    def status_of(self, participant_id: str) -> PaymentStatus:
        p = self.collection.get(participant_id)
        if p is None:
            raise UnknownParticipant(f"participant {participant_id!r} is not on the board")
        return p.payment_status

    def summary(self) -> Dict[str, int]:
        return {
            "total": len(self.collection),
            "paid": self.tally[PaymentStatus.PAID],
            "unpaid": self.tally[PaymentStatus.UNPAID],
        }

    def __len__(self) -> int:
        return len(self.collection)

    def __iter__(self) -> Iterator[Participant]:
        return iter(self.collection.values())
