# tamagochi/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from tamagochi.core.config import config_by_name

# - API 블루프린트
from tamagochi.api.pet_name.routes import pet_name_bp
from tamagochi.api.tamagotchis.routes import tamagotchis_bp
from tamagochi.api.companion.routes import companion_bp
from tamagochi.api.community.routes import community_bp

# - 서비스 모듈
from tamagochi.services.storage_service import build_store
from tamagochi.services.session_service import SessionBinding
from tamagochi.services.companion_service import CompanionService
from tamagochi.api.pet_name.services import PetNameService
from tamagochi.api.community.services import CommunityService


def _init_firebase(app: Flask):
    """firestore 백엔드를 사용할 때만 Firebase 앱을 초기화합니다."""
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    firebase_admin.initialize_app(credentials.Certificate(cred_path))


def create_app(config_name: Optional[str] = None, store=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param store: 미리 만든 TamagochiStore를 주입할 때 사용 (주로 테스트)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if store is None and app.config['STORAGE_BACKEND'] == 'firestore':
        _init_firebase(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 저장소와 세션 바인딩 먼저 생성
    try:
        app.services['store'] = store if store is not None else build_store(app.config)
        logging.info(f"Tamagochi store initialized ({app.services['store'].backend_name})")
    except Exception as e:
        logging.error(f"Failed to initialize tamagochi store: {e}")
        raise

    session_binding = SessionBinding()
    session_binding.init_app(app)
    app.services['session'] = session_binding

    companions = CompanionService()
    companions.init_app(app)
    app.services['companions'] = companions

    # 5-2. 저장소를 주입받는 도메인 서비스 생성
    app.services['pet_names'] = PetNameService(
        store=app.services['store'],
        remove_on_clear=app.config['REMOVE_RECORD_ON_CLEAR']
    )
    app.services['community'] = CommunityService(store=app.services['store'])

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(pet_name_bp, url_prefix='/api/pet-name')
    app.register_blueprint(tamagotchis_bp, url_prefix='/api/tamagotchis')
    app.register_blueprint(companion_bp, url_prefix='/api/companion')
    app.register_blueprint(community_bp, url_prefix='/api/community')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify({"error_code": "NOT_FOUND", "message": "A kért erőforrás nem található."}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(err):
        return jsonify({"error_code": "METHOD_NOT_ALLOWED", "message": "Ez a metódus itt nem támogatott."}), 405

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        if isinstance(err, HTTPException):
            return jsonify({"error_code": err.name.upper().replace(" ", "_"), "message": err.description}), err.code

        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "Váratlan szerverhiba történt."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
