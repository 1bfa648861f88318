# admin dashboard: board + optimistic payment toggles over the API client
import logging
from typing import Dict, Hashable, List, Optional

from ..models import Participant, PaymentStatus
from .api import APIClient
from .board import ParticipantBoard
from .optimistic import OptimisticController, Outcome

logger = logging.getLogger(__name__)


def flip(status: PaymentStatus) -> PaymentStatus:
    return PaymentStatus.UNPAID if status is PaymentStatus.PAID else PaymentStatus.PAID


class Dashboard:
    def __init__(
        self,
        api: APIClient,
        board: Optional[ParticipantBoard] = None,
        controller: Optional[OptimisticController] = None,
    ) -> None:
        self.api = api
        self.board = board if board is not None else ParticipantBoard()
        self.controller = controller if controller is not None else OptimisticController()
        # updated_at reported by the server, per confirmed id
        self._confirmed_at: Dict[Hashable, object] = {}

    async def refresh(self) -> List[Participant]:
        participants = await self.api.list_participants()
        self.board.load(participants)
        return participants

    def displayed_status(self, participant_id: str) -> PaymentStatus:
        """
        What a toggle button should show right now, in-flight value included.
        """
        if self.controller.is_pending(participant_id):
            return self.controller.displayed(participant_id)
        return self.board.status_of(participant_id)

    def can_toggle(self, participant_id: str) -> bool:
        return not self.controller.is_pending(participant_id)

    async def _confirm(self, participant_id: Hashable, status: PaymentStatus) -> None:
        out = await self.api.update_payment(str(participant_id), status)
        self._confirmed_at[participant_id] = out.updated_at

    async def set_payment(self, participant_id: str, target: PaymentStatus) -> Outcome:
        """
        Optimistically move participant_id to target. The board only changes
        after the server confirms; errors propagate with nothing applied.
        """
        original = self.board.status_of(participant_id)
        outcome = await self.controller.propose(participant_id, original, PaymentStatus(target), self._confirm)
        self.board.apply_confirmed_mutation(
            participant_id, outcome.value, self._confirmed_at.pop(participant_id, None)
        )
        logger.info("Payment status for %s confirmed as %s", participant_id, outcome.value.value)
        return outcome

    async def toggle_payment(self, participant_id: str) -> Outcome:
        return await self.set_payment(participant_id, flip(self.board.status_of(participant_id)))
