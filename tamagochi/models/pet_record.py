# tamagochi/models/pet_record.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from tamagochi.utils.datetime_utils import DateTimeUtils


def normalise_name(value: str) -> str:
    """저장 전 이름 정규화: 앞뒤 공백만 제거합니다."""
    return value.strip()


def comparison_key(value: str) -> str:
    """이름 비교 키. 공백을 제거하고 대소문자를 무시합니다."""
    return normalise_name(value).casefold()


def names_equal(first: str, second: str) -> bool:
    return comparison_key(first) == comparison_key(second)


@dataclass(frozen=True)
class PetRecord:
    """
    공유 타마고치 목록의 한 항목.
    저장 형식은 {"name": str, "createdAt": ISO-8601} 입니다.
    """
    name: str
    created_at: datetime

    @property
    def key(self) -> str:
        return comparison_key(self.name)

    def with_name(self, name: str) -> "PetRecord":
        """생성 시각은 유지한 채 표기(대소문자)만 바꾼 새 레코드를 반환합니다."""
        return PetRecord(name=name, created_at=self.created_at)

    def to_dict(self) -> Dict[str, str]:
        return {
            'name': self.name,
            'createdAt': DateTimeUtils.to_iso_string(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["PetRecord"]:
        """
        저장소에서 읽은 값을 PetRecord로 변환합니다.
        형식이 맞지 않거나 이름이 비어 있거나 시각을 해석할 수 없으면 None을 반환합니다.
        """
        if not isinstance(data, dict):
            return None

        name = data.get('name')
        created_at = data.get('createdAt')
        if not isinstance(name, str) or not isinstance(created_at, str):
            return None

        trimmed = normalise_name(name)
        if not trimmed:
            return None

        try:
            parsed = DateTimeUtils.parse_iso_datetime(created_at)
        except ValueError:
            return None

        return cls(name=trimmed, created_at=parsed)


def sanitise_records(entries: Iterable[Any]) -> List[PetRecord]:
    """유효한 항목만 남기고 생성 시각 오름차순으로 정렬합니다."""
    records = [record for record in (PetRecord.from_dict(entry) for entry in entries) if record]
    return sorted(records, key=lambda record: record.created_at)
