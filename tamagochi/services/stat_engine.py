# tamagochi/services/stat_engine.py
"""
스탯 엔진: 게이지 변화, 주기적 감소, 분위기 프리셋, 경고(히스테리시스)를 담당합니다.

모든 변경은 PetStats.apply를 거치므로 게이지는 항상 [0, 100]에 머뭅니다.
변경 후에는 경고 규칙을 평가하며, 한 번 울린 경고는 게이지가 회복 임계값을
넘을 때까지 다시 울리지 않습니다.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from tamagochi.models.mood import DEFAULT_MOOD_ID, MoodPreset, get_mood
from tamagochi.models.pet_stats import PetStats
from tamagochi.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

BASE_DECAY = {'hunger': -3.0, 'energy': -2.0, 'happiness': -2.0}

BASE_ACTIONS: Dict[str, Dict[str, float]] = {
    'feed': {'hunger': 18, 'happiness': 6, 'energy': 4},
    'play': {'happiness': 12, 'energy': -6, 'hunger': -4},
    'rest': {'energy': 16, 'hunger': -3, 'happiness': 4},
}

ACTION_COUNTERS = {'feed': 'meals', 'play': 'plays', 'rest': 'rests'}
ACTION_ANIMATIONS = {'feed': 'eating', 'play': 'playing', 'rest': 'resting'}
ACTION_MESSAGES = {
    'feed': "Finom pixel-ebédet kapott a tamagochi.",
    'play': "Játékra hívtad a tamagochit.",
    'rest': "Lefektetted egy kis pihenésre.",
}

STAT_LABELS = {
    'hunger': ("Jóllakottság", "🍽️"),
    'happiness': ("Kedv", "🎉"),
    'energy': ("Energia", "⚡"),
}


@dataclass(frozen=True)
class WarningRule:
    """gauge가 low 이하로 떨어지면 한 번 경고하고, recover를 넘으면 다시 경고할 수 있게 됩니다."""
    gauge: str
    low: float
    recover: float
    message: str


WARNING_RULES = (
    WarningRule('hunger', 25, 40, "A tamagochi éhesen morog."),
    WarningRule('energy', 25, 40, "A tamagochi kezd lemerülni, ideje pihenni."),
    WarningRule('happiness', 30, 45, "A tamagochi hiányolja a játékot."),
)


class StatEngine:
    """한 타마고치의 게이지, 돌봄 횟수, 분위기, 활동 기록을 관리합니다."""

    def __init__(self,
                 stats: Optional[PetStats] = None,
                 mood_id: str = DEFAULT_MOOD_ID,
                 activity_log: Optional[ActivityLog] = None):
        mood = get_mood(mood_id)
        if mood is None:
            raise ValueError(f"Ismeretlen hangulat: {mood_id}")

        self.stats = stats or PetStats()
        self.mood: MoodPreset = mood
        self.activity = activity_log if activity_log is not None else ActivityLog()
        self.care = {'meals': 0, 'plays': 0, 'rests': 0}
        self._warned = {rule.gauge: False for rule in WARNING_RULES}
        self._check_warnings()

    def apply(self, changes: Mapping[str, float]) -> List[str]:
        """변화량을 적용하고, 새로 발생한 경고 메시지 목록을 반환합니다."""
        self.stats.apply(changes)
        return self._check_warnings()

    def perform(self, action: str) -> List[str]:
        """돌봄 행동(feed/play/rest)을 수행합니다. 분위기 프리셋이 변화량을 바꿀 수 있습니다."""
        if action not in BASE_ACTIONS:
            raise ValueError(f"Ismeretlen művelet: {action}")

        deltas = dict(BASE_ACTIONS[action])
        deltas.update(self.mood.action_overrides.get(action, {}))

        self.care[ACTION_COUNTERS[action]] += 1
        self.activity.add(ACTION_MESSAGES[action])
        return self.apply(deltas)

    def decay_delta(self) -> Dict[str, float]:
        delta = dict(BASE_DECAY)
        for gauge, modifier in self.mood.decay_modifier.items():
            delta[gauge] += modifier
        return delta

    def decay_tick(self) -> List[str]:
        """주기적 감소 한 번."""
        return self.apply(self.decay_delta())

    def select_mood(self, mood_id: str) -> bool:
        """분위기를 바꿉니다. 같은 분위기를 다시 고르면 아무 일도 일어나지 않고 False를 반환합니다."""
        mood = get_mood(mood_id)
        if mood is None:
            raise ValueError(f"Ismeretlen hangulat: {mood_id}")
        if mood.mood_id == self.mood.mood_id:
            return False

        self.mood = mood
        self.activity.add(f"Hangulat mód: {mood.label}.")
        return True

    def status_message(self) -> str:
        average = self.stats.average
        emoji = self.mood.emoji
        if average >= 75:
            return f"{emoji} {self.mood.label} üzemmód: boldogan csillog a kis pixel lény!"
        if average >= 55:
            return f"{emoji} A tamagochi kiegyensúlyozott és kíváncsian figyel."
        if average >= 35:
            return f"{emoji} Kicsit nyűgös, jólesne neki egy kis törődés."
        return f"{emoji} Vészjelzés! A tamagochi sürgősen gondoskodásra vágyik."

    def warnings(self) -> Dict[str, bool]:
        return dict(self._warned)

    def stat_items(self) -> List[Dict[str, object]]:
        items = []
        for gauge in ('hunger', 'happiness', 'energy'):
            label, icon = STAT_LABELS[gauge]
            items.append({'id': gauge, 'label': label, 'icon': icon, 'value': round(getattr(self.stats, gauge), 1)})
        return items

    def _check_warnings(self) -> List[str]:
        fired = []
        for rule in WARNING_RULES:
            value = getattr(self.stats, rule.gauge)
            if value <= rule.low and not self._warned[rule.gauge]:
                self._warned[rule.gauge] = True
                fired.append(rule.message)
            elif value > rule.recover and self._warned[rule.gauge]:
                self._warned[rule.gauge] = False

        for message in fired:
            self.activity.add(message)
            logger.debug(f"Stat warning fired: {message}")
        return fired

