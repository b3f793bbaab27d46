# tamagochi/services/games/reflex.py
import time
from typing import Callable, Dict, Optional

from .base import GameStateError, MiniGame

IDLE = 'idle'
WAITING = 'waiting'
READY = 'ready'
SUCCESS = 'success'
FAIL = 'fail'

MIN_DELAY_SECONDS = 1.5
MAX_DELAY_SECONDS = 4.0

SUCCESS_DELTA = {'happiness': 8, 'energy': -2}
FAIL_DELTA = {'happiness': -3}


class ReflexGame(MiniGame):
    """
    반응속도 게임. idle -> waiting(무작위 지연) -> ready -> success / fail

    ready 전에 누르면 항상 실패하며 반응 시간은 기록되지 않습니다.
    """
    game_id = 'reflex'
    timer_kinds = ('ready',)

    def __init__(self, engine, scheduler, rng=None, clock: Optional[Callable[[], float]] = None):
        super().__init__(engine, scheduler, rng)
        self.clock = clock or time.monotonic
        self.state = IDLE
        self.ready_at: Optional[float] = None
        self.last_reaction_ms: Optional[int] = None
        self.best_reaction_ms: Optional[int] = None

    def start(self) -> float:
        """새 라운드를 시작하고 선택된 지연 시간(초)을 반환합니다."""
        delay = self.rng.uniform(MIN_DELAY_SECONDS, MAX_DELAY_SECONDS)
        self.state = WAITING
        self.ready_at = None
        self.last_reaction_ms = None
        self.scheduler.schedule(self._timer('ready'), delay, self._become_ready)
        return delay

    def _become_ready(self) -> None:
        if self.state != WAITING:
            return
        self.state = READY
        self.ready_at = self.clock()

    def click(self) -> str:
        if self.state == WAITING:
            self.scheduler.cancel(self._timer('ready'))
            self.state = FAIL
            self.last_reaction_ms = None
            self._outcome(FAIL_DELTA, "Túl korán kattintottál a reflexjátékban.")
            return self.state

        if self.state == READY:
            reaction_ms = max(0, int(round((self.clock() - self.ready_at) * 1000)))
            self.state = SUCCESS
            self.last_reaction_ms = reaction_ms
            if self.best_reaction_ms is None or reaction_ms < self.best_reaction_ms:
                self.best_reaction_ms = reaction_ms
            self._outcome(SUCCESS_DELTA, f"Villámgyors reflex: {reaction_ms} ms!")
            return self.state

        raise GameStateError("Előbb indítsd el a reflexjátékot!")

    def to_dict(self) -> Dict[str, object]:
        return {
            'state': self.state,
            'last_reaction_ms': self.last_reaction_ms,
            'best_reaction_ms': self.best_reaction_ms,
        }
