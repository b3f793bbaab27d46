# tamagochi/api/pet_name/schemas.py
from flask import current_app
from marshmallow import Schema, fields, post_load, ValidationError, EXCLUDE

from tamagochi.services.session_service import NameValidationError


def validate_pet_name(value):
    """SessionBinding 설정(최대 길이)에 따라 이름을 검증합니다."""
    try:
        current_app.services['session'].validate_name(value)
    except NameValidationError as e:
        raise ValidationError(str(e))


class PetNameRequestSchema(Schema):
    """POST /api/pet-name 요청 본문 스키마."""
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(
        required=True,
        validate=validate_pet_name,
        error_messages={
            "required": "Adj meg egy nevet, hogy elmentsük a sessionbe!",
            "null": "Adj meg egy nevet, hogy elmentsük a sessionbe!",
            "invalid": "A név csak szöveg lehet.",
        }
    )

    @post_load
    def strip_name(self, data, **kwargs):
        data['name'] = data['name'].strip()
        return data


class PetNameResponseSchema(Schema):
    """GET/POST/DELETE /api/pet-name 응답 스키마."""
    name = fields.Str(allow_none=True)
