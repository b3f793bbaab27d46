# tamagochi/services/activity_log.py
import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from tamagochi.utils.datetime_utils import DateTimeUtils

MAX_LOG_ITEMS = 7

INITIAL_ACTIVITY = (
    "A tojás megrepedt és egy kíváncsi tamagochi bukkant elő!",
    "Megsimogattad a pixel bundáját.",
    "A tamagochi megfigyelte a neonfényű eget.",
)


@dataclass(frozen=True)
class ActivityEntry:
    entry_id: int
    message: str
    at: datetime

    def to_dict(self) -> Dict[str, object]:
        return {
            'id': self.entry_id,
            'message': self.message,
            'at': DateTimeUtils.to_iso_string(self.at),
        }


class ActivityLog:
    """최신 항목이 맨 앞에 오는, 길이가 제한된 활동 기록."""

    def __init__(self, max_items: int = MAX_LOG_ITEMS, initial: Optional[Iterable[str]] = INITIAL_ACTIVITY):
        self.max_items = max_items
        self._ids = itertools.count(1)
        self._entries: List[ActivityEntry] = []
        now = DateTimeUtils.now()
        for message in initial or ():
            self._entries.append(ActivityEntry(next(self._ids), message, now))
        del self._entries[max_items:]

    def add(self, message: str) -> ActivityEntry:
        entry = ActivityEntry(next(self._ids), message, DateTimeUtils.now())
        self._entries.insert(0, entry)
        del self._entries[self.max_items:]
        return entry

    @property
    def entries(self) -> List[ActivityEntry]:
        return list(self._entries)

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> List[Dict[str, object]]:
        return [entry.to_dict() for entry in self._entries]
