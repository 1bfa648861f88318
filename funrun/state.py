# in-memory registry + helpers
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .models import Participant, PaymentStatus


class DuplicateEmail(Exception):
    pass


@dataclass
class AdminRecord:
    id: str
    email: str
    password_hash: str


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Registry:
    """
    Participants and admins for one running app.

    participants[id] = Participant, in registration order.
    Sync route handlers run in a threadpool, so writes go through a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.participants: Dict[str, Participant] = {}
        self._by_email: Dict[str, str] = {}
        self.admins: Dict[str, AdminRecord] = {}

    # ----------- participants -----------

    def create_participant(
        self,
        name: str,
        email: str,
        phone: str,
        address: str,
        instagram_handle: Optional[str] = None,
    ) -> Participant:
        with self._lock:
            if email in self._by_email:
                raise DuplicateEmail(email)
            now = _now()
            p = Participant(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                phone=phone,
                instagram_handle=instagram_handle,
                address=address,
                created_at=now,
                updated_at=now,
            )
            self.participants[p.id] = p
            self._by_email[email] = p.id
            return p

    def find_by_email(self, email: str) -> Optional[Participant]:
        pid = self._by_email.get(email)
        return self.participants.get(pid) if pid else None

    def find_by_id(self, participant_id: str) -> Optional[Participant]:
        return self.participants.get(participant_id)

    def all_participants(self) -> List[Participant]:
        """
        Newest registration first.
        """
        return list(reversed(list(self.participants.values())))

    def update_payment_status(
        self, participant_id: str, status: PaymentStatus
    ) -> Tuple[Participant, PaymentStatus]:
        """
        Returns (updated participant, previous status). KeyError if unknown.
        """
        with self._lock:
            current = self.participants[participant_id]
            updated = current.model_copy(update={"payment_status": status, "updated_at": _now()})
            self.participants[participant_id] = updated
            return updated, current.payment_status

    # ----------- admins -----------

    def add_admin(self, email: str, password_hash: str) -> AdminRecord:
        with self._lock:
            rec = AdminRecord(id=str(uuid.uuid4()), email=email, password_hash=password_hash)
            self.admins[email] = rec
            return rec

    def find_admin_by_email(self, email: str) -> Optional[AdminRecord]:
        return self.admins.get(email)
