# tamagochi/services/games/treasure.py
from typing import Dict, Optional, Set

from .base import GameStateError, MiniGame

GRID_SIZE = 3
MAX_ATTEMPTS = 3
NEXT_ROUND_SECONDS = 2.5

PLAYING = 'playing'
FOUND = 'found'
LOST = 'lost'

FOUND_DELTA = {'happiness': 10, 'energy': -3}
LOST_DELTA = {'happiness': -4}


class TreasureHunt(MiniGame):
    """
    kincskereső. GRID_SIZE x GRID_SIZE 칸 중 하나에 보물이 숨어 있고 MAX_ATTEMPTS번 고를 수 있습니다.
    연속 성공 횟수(streak)와 최고 기록을 유지하며, 라운드가 끝나면 잠시 후 새 라운드가 열립니다.
    """
    game_id = 'treasure'
    timer_kinds = ('next_round',)

    def __init__(self, engine, scheduler, rng=None, size: int = GRID_SIZE, attempts: int = MAX_ATTEMPTS):
        super().__init__(engine, scheduler, rng)
        self.size = size
        self.max_attempts = attempts
        self.streak = 0
        self.best_streak = 0
        self.rounds = 0
        self.target: Optional[int] = None
        self.revealed: Set[int] = set()
        self.attempts_left = attempts
        self.status = PLAYING
        self.new_round()

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    def new_round(self) -> None:
        self.scheduler.cancel(self._timer('next_round'))
        self.target = self.rng.randrange(self.cell_count)
        self.revealed = set()
        self.attempts_left = self.max_attempts
        self.status = PLAYING

    def pick(self, cell: int) -> str:
        if self.status != PLAYING:
            raise GameStateError("Ez a kör már véget ért, indíts újat!")
        if not 0 <= cell < self.cell_count:
            raise ValueError(f"A mező sorszáma 0 és {self.cell_count - 1} között legyen.")
        if cell in self.revealed:
            raise GameStateError("Ezt a mezőt már felfedted.")

        self.revealed.add(cell)

        if cell == self.target:
            self.status = FOUND
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
            self._finish_round(FOUND_DELTA, f"Megvan a kincs! Sorozat: {self.streak}.")
            return self.status

        self.attempts_left -= 1
        if self.attempts_left <= 0:
            self.status = LOST
            self.streak = 0
            self._finish_round(LOST_DELTA, "Elfogytak a próbálkozások, a kincs rejtve maradt.")
        return self.status

    def _finish_round(self, deltas, message: str) -> None:
        self.rounds += 1
        self._outcome(deltas, message)
        self.scheduler.schedule(self._timer('next_round'), NEXT_ROUND_SECONDS, self.new_round)

    def to_dict(self) -> Dict[str, object]:
        return {
            'size': self.size,
            'status': self.status,
            'revealed': sorted(self.revealed),
            'attempts_left': self.attempts_left,
            'streak': self.streak,
            'best_streak': self.best_streak,
            'rounds': self.rounds,
            # 보물 위치는 라운드가 끝난 뒤에만 공개합니다.
            'target': self.target if self.status != PLAYING else None,
        }
