# tamagochi/api/companion/schemas.py
from marshmallow import Schema, fields, validate

from tamagochi.models.mood import MOOD_PRESETS
from tamagochi.services.games.rps import CHOICES


class MoodSelectSchema(Schema):
    """PUT /api/companion/mood 요청 스키마."""
    mood = fields.Str(required=True, validate=validate.OneOf([preset.mood_id for preset in MOOD_PRESETS]))


class QuizGuessSchema(Schema):
    """POST /api/companion/games/quiz/guess 요청 스키마."""
    option = fields.Str(required=True, validate=validate.Length(min=1))


class TreasurePickSchema(Schema):
    """POST /api/companion/games/treasure/pick 요청 스키마."""
    cell = fields.Int(required=True, strict=True, validate=validate.Range(min=0))


class RpsPlaySchema(Schema):
    """POST /api/companion/games/rps 요청 스키마."""
    choice = fields.Str(required=True, validate=validate.OneOf(CHOICES))
