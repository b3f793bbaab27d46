# tamagochi/services/games/__init__.py
from .base import GameStateError, MiniGame
from .reflex import ReflexGame
from .quiz import MoodQuiz
from .treasure import TreasureHunt
from .rps import RockPaperScissors

__all__ = [
    'GameStateError', 'MiniGame',
    'ReflexGame', 'MoodQuiz', 'TreasureHunt', 'RockPaperScissors'
]
