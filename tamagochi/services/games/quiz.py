# tamagochi/services/games/quiz.py
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from tamagochi.models.mood import MOOD_PRESETS

from .base import GameStateError, MiniGame

AUTO_ADVANCE_SECONDS = 1.5

CORRECT_DELTA = {'happiness': 6}
WRONG_DELTA = {'happiness': -1}


@dataclass(frozen=True)
class QuizQuestion:
    prompt: str
    options: Tuple[str, ...]
    answer: str


def build_mood_questions() -> List[QuizQuestion]:
    """분위기 프리셋에서 문제를 만듭니다: 아이콘과 설명마다 정답 라벨 하나."""
    labels = tuple(preset.label for preset in MOOD_PRESETS)
    questions = []
    for preset in MOOD_PRESETS:
        questions.append(QuizQuestion(f"Melyik hangulat ikonja ez: {preset.emoji}?", labels, preset.label))
        questions.append(QuizQuestion(f"Melyik hangulatot írja le: „{preset.description}”", labels, preset.label))
    return questions


class MoodQuiz(MiniGame):
    """
    hangulat-kvíz. 보기는 출제할 때마다 섞이며 정답은 하나입니다.
    정답을 맞히면 문제가 잠기고, 잠시 후 자동으로 다음 문제로 넘어갑니다.
    """
    game_id = 'quiz'
    timer_kinds = ('advance',)

    def __init__(self, engine, scheduler, rng=None, questions: Optional[List[QuizQuestion]] = None):
        super().__init__(engine, scheduler, rng)
        self.questions = list(questions) if questions is not None else build_mood_questions()
        if not self.questions:
            raise ValueError("A kvízhez legalább egy kérdés kell.")
        self.order = list(range(len(self.questions)))
        self.rng.shuffle(self.order)
        self.position = 0
        self.score = 0
        self.asked = 0
        self.locked = False
        self.last_result: Optional[bool] = None
        self.options: List[str] = []
        self._shuffle_options()

    @property
    def current(self) -> QuizQuestion:
        return self.questions[self.order[self.position]]

    def _shuffle_options(self) -> None:
        self.options = list(self.current.options)
        self.rng.shuffle(self.options)

    def guess(self, option: str) -> bool:
        if self.locked:
            raise GameStateError("Ezt a kérdést már megválaszoltad, jön a következő!")
        if option not in self.options:
            raise ValueError(f"Ismeretlen válaszlehetőség: {option}")

        if option != self.current.answer:
            self.last_result = False
            self._outcome(WRONG_DELTA, "Nem talált, próbáld újra a kvízben!")
            return False

        self.locked = True
        self.last_result = True
        self.score += 1
        self._outcome(CORRECT_DELTA, "Helyes válasz a hangulat-kvízben!")
        self.scheduler.schedule(self._timer('advance'), AUTO_ADVANCE_SECONDS, self.next_question)
        return True

    def next_question(self) -> None:
        self.scheduler.cancel(self._timer('advance'))
        self.asked += 1
        self.position += 1
        if self.position >= len(self.order):
            self.position = 0
            self.rng.shuffle(self.order)
        self.locked = False
        self.last_result = None
        self._shuffle_options()

    def to_dict(self) -> Dict[str, object]:
        return {
            'prompt': self.current.prompt,
            'options': list(self.options),
            'locked': self.locked,
            'last_result': self.last_result,
            'score': self.score,
            'asked': self.asked,
        }
