# tamagochi/services/games/rps.py
from typing import Dict, Optional

from .base import MiniGame

CHOICES = ('rock', 'paper', 'scissors')
CHOICE_LABELS = {'rock': 'kő', 'paper': 'papír', 'scissors': 'olló'}
# 키가 값을 이깁니다.
BEATS = {'rock': 'scissors', 'scissors': 'paper', 'paper': 'rock'}

WIN = 'win'
DRAW = 'draw'
LOSS = 'loss'

OUTCOME_DELTAS = {
    WIN: {'happiness': 7, 'energy': -2},
    DRAW: {'happiness': 2},
    LOSS: {'happiness': -2},
}


def decide(player: str, opponent: str) -> str:
    if player == opponent:
        return DRAW
    return WIN if BEATS[player] == opponent else LOSS


class RockPaperScissors(MiniGame):
    """kő-papír-olló: 한 판마다 상대는 무작위로 고릅니다."""
    game_id = 'rps'

    def __init__(self, engine, scheduler, rng=None):
        super().__init__(engine, scheduler, rng)
        self.tally = {WIN: 0, DRAW: 0, LOSS: 0}
        self.last_round: Optional[Dict[str, str]] = None

    def play(self, choice: str) -> Dict[str, str]:
        if choice not in CHOICES:
            raise ValueError(f"Ismeretlen választás: {choice}")

        opponent = self.rng.choice(CHOICES)
        outcome = decide(choice, opponent)
        self.tally[outcome] += 1
        self.last_round = {'player': choice, 'opponent': opponent, 'outcome': outcome}

        messages = {
            WIN: f"Kő-papír-olló: nyertél! ({CHOICE_LABELS[choice]} vs {CHOICE_LABELS[opponent]})",
            DRAW: f"Kő-papír-olló: döntetlen ({CHOICE_LABELS[choice]}).",
            LOSS: f"Kő-papír-olló: vesztettél. ({CHOICE_LABELS[choice]} vs {CHOICE_LABELS[opponent]})",
        }
        self._outcome(OUTCOME_DELTAS[outcome], messages[outcome])
        return dict(self.last_round)

    def to_dict(self) -> Dict[str, object]:
        return {
            'tally': dict(self.tally),
            'last_round': dict(self.last_round) if self.last_round else None,
        }
