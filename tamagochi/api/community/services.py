# tamagochi/api/community/services.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from tamagochi.models.pet_record import PetRecord, names_equal
from tamagochi.services.storage_service import TamagochiStore
from tamagochi.utils.datetime_utils import DateTimeUtils
from tamagochi.utils.text_utils import initials_from_name, slugify_name


class CommunityService:
    """
    공유 목록을 커뮤니티 피드 형태로 가공합니다.
    세션 이름과 같은 기록은 'me'로, 나머지는 'others'로 나눕니다.
    """
    def __init__(self, store: TamagochiStore):
        self.store = store

    @staticmethod
    def card(record: PetRecord, now: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            'name': record.name,
            'handle': slugify_name(record.name),
            'initials': initials_from_name(record.name),
            'createdAt': DateTimeUtils.to_iso_string(record.created_at),
            'age': DateTimeUtils.format_elapsed(record.created_at, now),
            'birthDate': DateTimeUtils.format_birth_date(record.created_at),
        }

    def feed(self, session_name: Optional[str], now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or DateTimeUtils.now()
        records = self.store.list()

        mine = None
        others: List[Dict[str, Any]] = []
        for record in records:
            if session_name and mine is None and names_equal(record.name, session_name):
                mine = self.card(record, now)
            else:
                others.append(self.card(record, now))

        return {'me': mine, 'others': others}
