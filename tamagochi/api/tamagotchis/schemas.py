# tamagochi/api/tamagotchis/schemas.py
from marshmallow import Schema, fields


class PetRecordSchema(Schema):
    """공유 목록의 한 항목. 저장 형식과 같은 키(name, createdAt)를 사용합니다."""
    name = fields.Str(required=True)
    createdAt = fields.Str(required=True)


class TamagotchiListResponseSchema(Schema):
    """GET /api/tamagotchis 응답 스키마."""
    tamagotchis = fields.List(fields.Nested(PetRecordSchema), required=True)
