# tamagochi/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta


def _env_flag(key: str, default: bool) -> bool:
    """'1', 'true', 'yes', 'on' 값을 True로 해석합니다."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 세션 쿠키(JWT)를 서명하는 데 사용되는 키입니다. 운영 환경에서는 반드시 .env에서 지정해야 합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'pixel-tamagochi-dev-secret')
    # 컴패니언 식별자를 담는 Flask 세션 쿠키 서명 키
    SECRET_KEY = os.getenv('SECRET_KEY', JWT_SECRET_KEY)
    SESSION_COOKIE_SAMESITE = 'Lax'
    JWT_SESSION_COOKIE = False
    # 세션은 쿠키로만 전달합니다. SameSite=Lax에 의존하며 CSRF 토큰은 사용하지 않습니다.
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SAMESITE = 'Lax'
    JWT_COOKIE_SECURE = False
    JWT_ACCESS_COOKIE_PATH = '/'

    # 세션에 묶이는 이름 쿠키 설정
    PET_NAME_COOKIE = os.getenv('PET_NAME_COOKIE', 'tamagochi-name')
    PET_NAME_MAX_LENGTH = int(os.getenv('PET_NAME_MAX_LENGTH', 24))
    PET_NAME_COOKIE_MAX_AGE = 60 * 60 * 24 * 30 # 30일
    JWT_ACCESS_COOKIE_NAME = PET_NAME_COOKIE
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=PET_NAME_COOKIE_MAX_AGE)
    # 세션 삭제 시 공유 목록에서도 해당 기록을 지울지 여부
    REMOVE_RECORD_ON_CLEAR = _env_flag('REMOVE_RECORD_ON_CLEAR', True)

    # 공유 타마고치 목록 저장소: 'memory', 'file', 'firestore' 중 하나
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'memory')
    TAMAGOTCHI_DATA_PATH = os.getenv('TAMAGOTCHI_DATA_PATH', os.path.join(os.getcwd(), 'data', 'tamagotchis.json'))
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIRESTORE_COLLECTION = os.getenv('FIRESTORE_COLLECTION', 'tamagochi')
    FIRESTORE_DOCUMENT = os.getenv('FIRESTORE_DOCUMENT', 'registry')

    # 스탯 감소 주기와 애니메이션 복귀 시간(초)
    DECAY_INTERVAL_SECONDS = float(os.getenv('DECAY_INTERVAL_SECONDS', 12))
    ANIMATION_RESET_SECONDS = float(os.getenv('ANIMATION_RESET_SECONDS', 2))
    SCHEDULER_ENABLED = True


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'pixel-tamagochi-test-secret'
    # 테스트는 항상 프로세스 메모리 저장소와 수동 tick으로 동작합니다.
    STORAGE_BACKEND = 'memory'
    SCHEDULER_ENABLED = False


class ProductionConfig(Config):
    """운영 환경 설정. 쿠키는 HTTPS에서만 전송됩니다."""
    DEBUG = False
    JWT_COOKIE_SECURE = True
    SESSION_COOKIE_SECURE = True


# FLASK_ENV 값에 따라 create_app에서 적절한 설정 클래스를 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
