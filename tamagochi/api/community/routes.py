# tamagochi/api/community/routes.py
import logging
from flask import Blueprint, jsonify, current_app

community_bp = Blueprint('community_bp', __name__)


@community_bp.route('', methods=['GET'])
def get_community_feed():
    """내 타마고치 카드와 다른 타마고치 카드 목록을 반환합니다."""
    session_name = current_app.services['session'].current_name()
    try:
        return jsonify(current_app.services['community'].feed(session_name)), 200
    except Exception as e:
        logging.error(f"Community feed API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Nem sikerült betölteni a tamagochi társakat."}), 500
