# tamagochi/api/tamagotchis/routes.py
import logging
from flask import Blueprint, jsonify, current_app

from .schemas import TamagotchiListResponseSchema

tamagotchis_bp = Blueprint('tamagotchis_bp', __name__)


@tamagotchis_bp.route('', methods=['GET'])
def list_tamagotchis():
    """등록된 모든 타마고치 목록을 생성 시각 순으로 반환합니다."""
    store = current_app.services['store']
    try:
        records = store.list()
        payload = {"tamagotchis": [record.to_dict() for record in records]}
        return jsonify(TamagotchiListResponseSchema().dump(payload)), 200
    except Exception as e:
        logging.error(f"Tamagotchi list API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Nem sikerült beolvasni a tamagochi társakat."}), 500
