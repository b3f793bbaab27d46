# tamagochi/services/session_service.py
"""
세션 바인딩: 브라우저 세션과 타마고치 이름을 연결합니다.

- 이름은 flask-jwt-extended로 서명한 JWT(identity = 이름)에 담겨
  HttpOnly, SameSite=Lax 쿠키로 전달됩니다. 만료는 30일입니다.
- 쿠키가 없거나 만료/위조되었으면 익명 세션으로 취급합니다.
- 컴패니언(스탯, 미니게임) 상태를 찾기 위한 companion_id는 Flask 세션에 보관합니다.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from flask import Flask, Response, session
from flask_jwt_extended import create_access_token, get_jwt_identity, set_access_cookies, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

logger = logging.getLogger(__name__)


class NameValidationError(ValueError):
    """세션에 저장할 이름이 비었거나 너무 길 때 발생합니다."""


@dataclass(frozen=True)
class PetSession:
    """요청 컨텍스트에서 전달되는 명시적 세션 객체."""
    name: Optional[str]
    companion_id: str

    @property
    def is_named(self) -> bool:
        return bool(self.name)


class SessionBinding:
    """이름 쿠키의 읽기/쓰기/삭제와 이름 검증을 담당합니다."""

    def __init__(self):
        self.cookie_name = 'tamagochi-name'
        self.max_length = 24
        self.max_age = 60 * 60 * 24 * 30
        self.secure = False

    def init_app(self, app: Flask):
        self.cookie_name = app.config['PET_NAME_COOKIE']
        self.max_length = app.config['PET_NAME_MAX_LENGTH']
        self.max_age = app.config['PET_NAME_COOKIE_MAX_AGE']
        self.secure = app.config.get('JWT_COOKIE_SECURE', False)
        logging.info(f"SessionBinding initialized (cookie: {self.cookie_name})")

    def validate_name(self, raw) -> str:
        """앞뒤 공백을 제거한 이름을 반환합니다. 비었거나 너무 길면 NameValidationError."""
        name = raw.strip() if isinstance(raw, str) else ''
        if not name:
            raise NameValidationError("Adj meg egy nevet, hogy elmentsük a sessionbe!")
        if len(name) > self.max_length:
            raise NameValidationError(f"A név legyen legfeljebb {self.max_length} karakter hosszú!")
        return name

    def current_name(self) -> Optional[str]:
        try:
            verify_jwt_in_request(optional=True, locations=['cookies'])
            identity = get_jwt_identity()
        except (JWTExtendedException, PyJWTError) as e:
            logger.info(f"Ignoring invalid session cookie: {e}")
            return None
        return identity if isinstance(identity, str) and identity.strip() else None

    def current(self) -> PetSession:
        """현재 요청의 세션 객체. companion_id가 없으면 새로 발급합니다."""
        companion_id = session.get('companion_id')
        if not companion_id:
            companion_id = uuid.uuid4().hex
            session['companion_id'] = companion_id
            session.permanent = True
        return PetSession(name=self.current_name(), companion_id=companion_id)

    def bind(self, response: Response, name: str) -> Response:
        token = create_access_token(identity=name, expires_delta=timedelta(seconds=self.max_age))
        set_access_cookies(response, token, max_age=self.max_age)
        return response

    def clear(self, response: Response) -> Response:
        response.set_cookie(
            self.cookie_name,
            value='',
            max_age=0,
            expires=0,
            path='/',
            httponly=True,
            secure=self.secure,
            samesite='Lax'
        )
        return response
