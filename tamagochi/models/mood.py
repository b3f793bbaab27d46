# tamagochi/models/mood.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MoodPreset:
    """
    사용자가 고르는 '분위기' 프리셋.
    decay_modifier는 주기적 감소량에 더해지고,
    action_overrides는 특정 행동(feed/play/rest)의 게이지 변화량을 대체합니다.
    """
    mood_id: str
    label: str
    emoji: str
    description: str
    decay_modifier: Dict[str, float] = field(default_factory=dict)
    action_overrides: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, str]:
        return {
            'id': self.mood_id,
            'label': self.label,
            'emoji': self.emoji,
            'description': self.description,
        }


MOOD_PRESETS: List[MoodPreset] = [
    MoodPreset(
        mood_id='vidam',
        label='Vidám',
        emoji='🌞',
        description='Neonfényű park, sok kacagás és pattogó pixel labdák.',
        decay_modifier={'hunger': -1, 'happiness': 0.5},
        action_overrides={'feed': {'hunger': 20}, 'play': {'happiness': 14}},
    ),
    MoodPreset(
        mood_id='kreativ',
        label='Kreatív',
        emoji='🎨',
        description='Rajztábla, csillámos sprite-ok és végtelen fantázia.',
        action_overrides={'play': {'energy': -3}},
    ),
    MoodPreset(
        mood_id='nyugodt',
        label='Nyugodt',
        emoji='🌙',
        description='Csillagos ég, halk lo-fi és lassú szuszogás.',
        decay_modifier={'energy': 0.7},
        action_overrides={'rest': {'energy': 22}},
    ),
    MoodPreset(
        mood_id='nosztalgikus',
        label='Nosztalgikus',
        emoji='📼',
        description='8-bites emlékek, kazettás magnó és békebeli játékok.',
        decay_modifier={'happiness': 0.8},
        action_overrides={'feed': {'happiness': 8}},
    ),
]

DEFAULT_MOOD_ID = MOOD_PRESETS[0].mood_id


def get_mood(mood_id: str) -> Optional[MoodPreset]:
    return next((preset for preset in MOOD_PRESETS if preset.mood_id == mood_id), None)
