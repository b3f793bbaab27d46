# tamagochi/api/pet_name/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from tamagochi.services.storage_service import StorageError
from .schemas import PetNameRequestSchema, PetNameResponseSchema

pet_name_bp = Blueprint('pet_name_bp', __name__)


def _first_message(messages) -> str:
    """marshmallow 오류 딕셔너리에서 사용자에게 보여줄 첫 메시지를 꺼냅니다."""
    if isinstance(messages, dict):
        for value in messages.values():
            return _first_message(value)
    if isinstance(messages, (list, tuple)) and messages:
        return _first_message(messages[0])
    return str(messages)


@pet_name_bp.route('', methods=['GET'])
def get_pet_name():
    """현재 세션에 묶인 타마고치 이름을 조회합니다."""
    name = current_app.services['session'].current_name()
    return jsonify(PetNameResponseSchema().dump({"name": name})), 200


@pet_name_bp.route('', methods=['POST'])
def set_pet_name():
    """이름을 공유 목록에 등록하고 세션 쿠키에 저장합니다."""
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error_code": "INVALID_BODY", "message": "Hibás kérés: nem sikerült elolvasni a nevet."}), 400

    try:
        validated = PetNameRequestSchema().load(payload)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": _first_message(err.messages), "details": err.messages}), 400

    name = validated['name']
    try:
        current_app.services['pet_names'].register(name)
    except StorageError as e:
        logging.error(f"Pet name registration failed ({name!r}): {e}", exc_info=True)
        return jsonify({"error_code": "STORAGE_FAILED", "message": "Nem sikerült elmenteni a tamagochit az adatfájlba."}), 500

    response = jsonify(PetNameResponseSchema().dump({"name": name}))
    current_app.services['session'].bind(response, name)
    return response, 200


@pet_name_bp.route('', methods=['DELETE'])
def clear_pet_name():
    """세션 쿠키를 지우고, 설정에 따라 공유 목록의 기록도 삭제합니다."""
    binding = current_app.services['session']
    current_app.services['pet_names'].clear(binding.current_name())

    response = jsonify(PetNameResponseSchema().dump({"name": None}))
    binding.clear(response)
    return response, 200
