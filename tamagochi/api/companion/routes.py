# tamagochi/api/companion/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from tamagochi.services.games import GameStateError
from .schemas import MoodSelectSchema, QuizGuessSchema, TreasurePickSchema, RpsPlaySchema

companion_bp = Blueprint('companion_bp', __name__)

CARE_ACTIONS = ('feed', 'play', 'rest')


def _current_companion():
    """요청 세션(companion_id)에 해당하는 Companion을 가져옵니다."""
    pet_session = current_app.services['session'].current()
    return current_app.services['companions'].get(pet_session.companion_id)


def _state_response(companion, status_code: int = 200, **extra):
    body = companion.snapshot()
    body.update(extra)
    return jsonify(body), status_code


def _body() -> dict:
    return request.get_json(silent=True) or {}


@companion_bp.route('', methods=['GET'])
def get_companion():
    """현재 세션 타마고치의 전체 상태(스탯, 분위기, 활동 기록, 미니게임)를 반환합니다."""
    return _state_response(_current_companion())


@companion_bp.route('', methods=['DELETE'])
def reset_companion():
    """대기 중인 타이머를 모두 정리하고 새 타마고치 상태로 초기화합니다."""
    pet_session = current_app.services['session'].current()
    companion = current_app.services['companions'].reset(pet_session.companion_id)
    return _state_response(companion)


@companion_bp.route('/moods', methods=['GET'])
def list_moods():
    return jsonify({"moods": current_app.services['companions'].moods()}), 200


@companion_bp.route('/actions/<string:action>', methods=['POST'])
def perform_action(action: str):
    """돌봄 행동: feed / play / rest."""
    if action not in CARE_ACTIONS:
        return jsonify({"error_code": "UNKNOWN_ACTION", "message": f"Ismeretlen művelet: {action}"}), 404
    companion = _current_companion()
    warnings = companion.perform(action)
    return _state_response(companion, new_warnings=warnings)


@companion_bp.route('/mood', methods=['PUT'])
def select_mood():
    try:
        data = MoodSelectSchema().load(_body())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    companion = _current_companion()
    changed = companion.select_mood(data['mood'])
    return _state_response(companion, changed=changed)


@companion_bp.route('/tick', methods=['POST'])
def decay_tick():
    """주기적 감소를 한 번 수동으로 적용합니다. (스케줄러가 꺼진 환경용)"""
    companion = _current_companion()
    warnings = companion.tick()
    return _state_response(companion, new_warnings=warnings)


# --- 미니게임 ---

@companion_bp.route('/games/reflex/start', methods=['POST'])
def start_reflex():
    companion = _current_companion()
    with companion.lock:
        companion.game('reflex').start()
    return _state_response(companion)


@companion_bp.route('/games/reflex/click', methods=['POST'])
def click_reflex():
    companion = _current_companion()
    try:
        with companion.lock:
            outcome = companion.game('reflex').click()
    except GameStateError as e:
        return jsonify({"error_code": "GAME_STATE_CONFLICT", "message": str(e)}), 409
    return _state_response(companion, outcome=outcome)


@companion_bp.route('/games/quiz', methods=['GET'])
def get_quiz():
    companion = _current_companion()
    with companion.lock:
        return jsonify(companion.game('quiz').to_dict()), 200


@companion_bp.route('/games/quiz/guess', methods=['POST'])
def guess_quiz():
    companion = _current_companion()
    try:
        data = QuizGuessSchema().load(_body())
        with companion.lock:
            correct = companion.game('quiz').guess(data['option'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except GameStateError as e:
        return jsonify({"error_code": "GAME_STATE_CONFLICT", "message": str(e)}), 409
    except ValueError as e:
        return jsonify({"error_code": "INVALID_OPTION", "message": str(e)}), 400
    return _state_response(companion, correct=correct)


@companion_bp.route('/games/quiz/next', methods=['POST'])
def next_quiz_question():
    companion = _current_companion()
    with companion.lock:
        companion.game('quiz').next_question()
    return _state_response(companion)


@companion_bp.route('/games/treasure', methods=['GET'])
def get_treasure():
    companion = _current_companion()
    with companion.lock:
        return jsonify(companion.game('treasure').to_dict()), 200


@companion_bp.route('/games/treasure/pick', methods=['POST'])
def pick_treasure():
    companion = _current_companion()
    try:
        data = TreasurePickSchema().load(_body())
        with companion.lock:
            status = companion.game('treasure').pick(data['cell'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except GameStateError as e:
        return jsonify({"error_code": "GAME_STATE_CONFLICT", "message": str(e)}), 409
    except ValueError as e:
        return jsonify({"error_code": "INVALID_CELL", "message": str(e)}), 400
    return _state_response(companion, outcome=status)


@companion_bp.route('/games/treasure/new', methods=['POST'])
def new_treasure_round():
    companion = _current_companion()
    with companion.lock:
        companion.game('treasure').new_round()
    return _state_response(companion)


@companion_bp.route('/games/rps', methods=['POST'])
def play_rps():
    companion = _current_companion()
    try:
        data = RpsPlaySchema().load(_body())
        with companion.lock:
            result = companion.game('rps').play(data['choice'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    logging.debug(f"RPS round: {result}")
    return _state_response(companion, round=result)
