# tamagochi/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

이 모듈의 목적:
1. 저장소에 기록되는 createdAt 값을 ISO-8601(밀리초, 'Z' 접미사)로 통일
2. Timezone 처리 일관성 확보 (백엔드는 UTC)
3. 커뮤니티 카드에 표시되는 헝가리어 경과 시간/생일 문구 생성
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
MONTH = 30 * DAY
YEAR = 365 * DAY

HUNGARIAN_MONTHS = (
    'január', 'február', 'március', 'április', 'május', 'június',
    'július', 'augusztus', 'szeptember', 'október', 'november', 'december'
)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00.000Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("empty string")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)

            # timezone-naive인 경우 UTC로 가정
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)

            return dt.astimezone(timezone.utc)

        except Exception as e:
            logger.debug(f"ISO datetime 파싱 실패: {iso_string!r} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 '2024-01-12T08:30:00.000Z' 형식 문자열로 변환"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    @staticmethod
    def format_elapsed(created_at: datetime, now: Optional[datetime] = None) -> str:
        """
        생성 시각부터 지금까지의 경과 시간을 헝가리어 문구로 반환합니다.

        한 달은 30일, 일 년은 365일로 계산하며, 미래 시각은 0으로 취급합니다.
        """
        now = now or DateTimeUtils.now()
        diff = max(0.0, (now - created_at).total_seconds())

        if diff < MINUTE:
            return "Néhány másodperce"
        if diff < HOUR:
            return f"{int(diff // MINUTE)} perce"
        if diff < DAY:
            return f"{int(diff // HOUR)} órája"
        if diff < MONTH:
            return f"{int(diff // DAY)} napja"
        if diff < YEAR:
            return f"{int(diff // MONTH)} hónapja"
        return f"{int(diff // YEAR)} éve"

    @staticmethod
    def format_birth_date(created_at: datetime) -> str:
        """'2024. január 12. 08:30' 형태의 헝가리어 날짜 문자열 (UTC 기준)"""
        dt = created_at.astimezone(timezone.utc)
        month = HUNGARIAN_MONTHS[dt.month - 1]
        return f"{dt.year}. {month} {dt.day}. {dt.hour:02d}:{dt.minute:02d}"


# 편의를 위한 글로벌 함수들
def now() -> datetime:
    """현재 UTC 시간 반환"""
    return DateTimeUtils.now()

def parse_iso(iso_string: str) -> datetime:
    """ISO 문자열을 datetime으로 파싱"""
    return DateTimeUtils.parse_iso_datetime(iso_string)

def to_iso(dt: datetime) -> str:
    """datetime을 ISO 문자열로 변환"""
    return DateTimeUtils.to_iso_string(dt)
