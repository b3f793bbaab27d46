# tamagochi/services/games/base.py
import random
from typing import Dict, Mapping, Optional

from tamagochi.services.scheduler import TaskScheduler
from tamagochi.services.stat_engine import StatEngine


class GameStateError(Exception):
    """현재 게임 상태에서 허용되지 않는 동작을 요청했을 때 발생합니다."""


class MiniGame:
    """
    미니게임 공통 기반 클래스.
    결과는 StatEngine에 고정 변화량으로 반영되고 활동 기록에 남습니다.
    대기 중인 타이머는 '<game_id>:<이름>' 종류로 스케줄러에 등록됩니다.
    """
    game_id = 'game'
    timer_kinds = ()

    def __init__(self, engine: StatEngine, scheduler: TaskScheduler, rng: Optional[random.Random] = None):
        self.engine = engine
        self.scheduler = scheduler
        self.rng = rng or random.Random()

    def _timer(self, name: str) -> str:
        return f"{self.game_id}:{name}"

    def _outcome(self, deltas: Mapping[str, float], message: str) -> None:
        self.engine.activity.add(message)
        self.engine.apply(deltas)

    def teardown(self) -> None:
        for name in self.timer_kinds:
            self.scheduler.cancel(self._timer(name))

    def to_dict(self) -> Dict[str, object]:
        raise NotImplementedError
