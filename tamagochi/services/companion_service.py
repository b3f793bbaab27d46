# tamagochi/services/companion_service.py
import logging
import random
import threading
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from flask import Flask

from tamagochi.models.mood import MOOD_PRESETS
from tamagochi.services.games import MoodQuiz, ReflexGame, RockPaperScissors, TreasureHunt
from tamagochi.services.scheduler import TaskScheduler
from tamagochi.services.stat_engine import ACTION_ANIMATIONS, StatEngine

logger = logging.getLogger(__name__)

IDLE_ANIMATION = 'idle'
DECAY_TASK = 'decay'
ANIMATION_TASK = 'animation'


class Companion:
    """
    한 브라우저 세션의 타마고치 상태(스탯, 분위기, 활동 기록, 애니메이션, 미니게임).

    타이머 콜백은 별도 스레드에서 실행되므로 모든 상태 변경은 self.lock 안에서 이루어집니다.
    """

    def __init__(self,
                 decay_interval: float = 12.0,
                 animation_reset: float = 2.0,
                 autostart: bool = True,
                 timer_factory: Optional[Callable] = None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.lock = threading.RLock()
        self.scheduler = TaskScheduler(timer_factory, callback_lock=self.lock)
        self.decay_interval = decay_interval
        self.animation_reset = animation_reset
        self.autostart = autostart
        self.engine = StatEngine()
        self.animation = IDLE_ANIMATION

        rng = rng or random.Random()
        self.games = {
            'reflex': ReflexGame(self.engine, self.scheduler, rng, clock=clock),
            'quiz': MoodQuiz(self.engine, self.scheduler, rng),
            'treasure': TreasureHunt(self.engine, self.scheduler, rng),
            'rps': RockPaperScissors(self.engine, self.scheduler, rng),
        }

        if autostart:
            self._start_decay()

    def _start_decay(self) -> None:
        # 같은 종류의 예약은 먼저 취소되므로 분위기를 바꿀 때마다 주기가 새로 시작됩니다.
        self.scheduler.schedule_repeating(DECAY_TASK, self.decay_interval, self.engine.decay_tick)

    def _reset_animation(self) -> None:
        self.animation = IDLE_ANIMATION

    def perform(self, action: str) -> List[str]:
        with self.lock:
            warnings = self.engine.perform(action)
            self.animation = ACTION_ANIMATIONS[action]
            self.scheduler.schedule(ANIMATION_TASK, self.animation_reset, self._reset_animation)
            return warnings

    def select_mood(self, mood_id: str) -> bool:
        with self.lock:
            changed = self.engine.select_mood(mood_id)
            if changed and self.autostart:
                self._start_decay()
            return changed

    def tick(self) -> List[str]:
        with self.lock:
            return self.engine.decay_tick()

    def game(self, game_id: str):
        game = self.games.get(game_id)
        if game is None:
            raise KeyError(game_id)
        return game

    def teardown(self) -> None:
        with self.lock:
            for game in self.games.values():
                game.teardown()
            self.scheduler.cancel_all()

    def snapshot(self) -> Dict[str, object]:
        with self.lock:
            engine = self.engine
            return {
                'stats': engine.stats.to_dict(),
                'stat_items': engine.stat_items(),
                'care': dict(engine.care),
                'mood': engine.mood.to_dict(),
                'status': engine.status_message(),
                'animation': self.animation,
                'warnings': engine.warnings(),
                'activity': engine.activity.to_list(),
                'games': {game_id: game.to_dict() for game_id, game in self.games.items()},
            }


class CompanionService:
    """
    세션별 Companion 인스턴스를 보관합니다.
    보관 개수가 max_companions를 넘으면 가장 오래 사용되지 않은 것부터 정리합니다.
    """

    def __init__(self, max_companions: int = 500, companion_factory: Optional[Callable[[], Companion]] = None):
        self.max_companions = max_companions
        self._companion_factory = companion_factory or Companion
        self._companions: "OrderedDict[str, Companion]" = OrderedDict()
        self._lock = threading.Lock()

    def init_app(self, app: Flask):
        decay_interval = app.config['DECAY_INTERVAL_SECONDS']
        animation_reset = app.config['ANIMATION_RESET_SECONDS']
        autostart = app.config.get('SCHEDULER_ENABLED', True)
        self._companion_factory = lambda: Companion(
            decay_interval=decay_interval,
            animation_reset=animation_reset,
            autostart=autostart
        )
        logging.info(f"CompanionService initialized (decay every {decay_interval}s, scheduler {'on' if autostart else 'off'}).")

    def get(self, companion_id: str) -> Companion:
        with self._lock:
            companion = self._companions.get(companion_id)
            if companion is not None:
                self._companions.move_to_end(companion_id)
                return companion

            companion = self._companion_factory()
            self._companions[companion_id] = companion
            while len(self._companions) > self.max_companions:
                evicted_id, evicted = self._companions.popitem(last=False)
                evicted.teardown()
                logger.info(f"Companion evicted: {evicted_id}")
            return companion

    def reset(self, companion_id: str) -> Companion:
        with self._lock:
            existing = self._companions.pop(companion_id, None)
        if existing is not None:
            existing.teardown()
        return self.get(companion_id)

    def shutdown(self) -> None:
        with self._lock:
            companions = list(self._companions.values())
            self._companions.clear()
        for companion in companions:
            companion.teardown()

    def __len__(self) -> int:
        return len(self._companions)

    @staticmethod
    def moods() -> List[Dict[str, str]]:
        return [preset.to_dict() for preset in MOOD_PRESETS]

