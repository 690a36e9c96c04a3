from __future__ import annotations

from datetime import time
import logging

from faculty_desk.models.schedule import Weekday
from faculty_desk.services.directory import DirectoryStore

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Looks up replacement candidates for one class slot.

    A candidate is any account with a schedule entry on the same weekday whose
    time range covers the requested slot (``start <= slot_start`` and
    ``end >= slot_end``). This matches faculty whose own class spans the slot,
    the applicant included.
    Duplicates are not removed and no order is guaranteed.
    """

    def __init__(self, store: DirectoryStore) -> None:
        self.store = store

    def find_replacements(self, weekday: Weekday, slot_start: time, slot_end: time) -> list[str]:
        candidates = self.store.find_covering_schedule_owners(weekday, slot_start, slot_end)
        logger.debug(
            "Replacement lookup %s %s-%s returned %d candidate(s)",
            weekday.value if isinstance(weekday, Weekday) else weekday,
            slot_start.isoformat(),
            slot_end.isoformat(),
            len(candidates),
        )
        return candidates
