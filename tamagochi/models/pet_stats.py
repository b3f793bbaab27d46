# tamagochi/models/pet_stats.py
from dataclasses import dataclass, asdict
from typing import Dict, Mapping

STAT_MIN = 0.0
STAT_MAX = 100.0
GAUGES = ('hunger', 'energy', 'happiness')


def clamp(value: float, minimum: float = STAT_MIN, maximum: float = STAT_MAX) -> float:
    return min(maximum, max(minimum, value))


@dataclass
class PetStats:
    """
    타마고치의 세 가지 게이지. 모든 값은 항상 [0, 100] 범위를 유지합니다.
    세션 동안만 메모리에 존재하며 저장되지 않습니다.
    """
    hunger: float = 68.0
    energy: float = 72.0
    happiness: float = 70.0

    def __post_init__(self):
        for gauge in GAUGES:
            setattr(self, gauge, clamp(float(getattr(self, gauge))))

    def apply(self, changes: Mapping[str, float]) -> "PetStats":
        """변화량을 더한 뒤 각 게이지를 다시 범위 안으로 자릅니다."""
        unknown = set(changes) - set(GAUGES)
        if unknown:
            raise ValueError(f"Unknown stat gauge(s): {', '.join(sorted(unknown))}")
        for gauge, delta in changes.items():
            setattr(self, gauge, clamp(getattr(self, gauge) + delta))
        return self

    @property
    def average(self) -> float:
        return (self.hunger + self.energy + self.happiness) / 3

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)
