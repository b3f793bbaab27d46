# tamagochi/services/storage_service.py
"""
공유 타마고치 목록 저장소.

배포 대상에 따라 세 가지 백엔드 중 하나를 create_app에서 생성해 주입합니다.
- memory: 프로세스 메모리 (인스턴스가 소유하는 목록)
- file: 단일 JSON 파일
- firestore: Firestore 문서 하나의 'records' 필드 (키-값 항목)

어느 백엔드든 저장된 데이터가 없거나 손상되었으면 기본 시드 목록을 돌려줍니다.
동시 쓰기에 대한 잠금은 없으며 마지막 쓰기가 이깁니다.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from firebase_admin import firestore

from tamagochi.models.pet_record import PetRecord, comparison_key, normalise_name, sanitise_records
from tamagochi.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'data', 'tamagotchis.json')

FALLBACK_TAMAGOTCHIS = sanitise_records([
    {'name': 'Pixel Panni', 'createdAt': '2024-01-12T08:30:00.000Z'},
    {'name': 'Render Róka', 'createdAt': '2023-11-03T18:15:00.000Z'},
    {'name': 'Synth Sanyi', 'createdAt': '2024-03-22T10:05:00.000Z'},
])


class StorageError(RuntimeError):
    """저장소 쓰기에 실패했을 때 발생합니다."""


def load_seed_records(path: str = DEFAULT_SEED_PATH) -> List[PetRecord]:
    """
    패키지에 포함된 기본 데이터셋을 읽습니다.
    파일이 없거나, 배열이 아니거나, 유효한 항목이 하나도 없으면 내장 목록을 사용합니다.
    """
    try:
        with open(path, encoding='utf-8') as f:
            dataset = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Seed dataset unavailable ({path}): {e}. Using built-in fallback.")
        return list(FALLBACK_TAMAGOTCHIS)

    if not isinstance(dataset, list):
        return list(FALLBACK_TAMAGOTCHIS)

    return sanitise_records(dataset) or list(FALLBACK_TAMAGOTCHIS)


class TamagochiStore(ABC):
    """
    list / upsert / remove 계약을 구현하는 저장소의 기반 클래스.
    하위 클래스는 원시 데이터를 읽고 쓰는 두 메서드만 구현합니다.
    모든 연산은 생성 시각 순으로 정렬된 레코드 목록의 사본을 반환합니다.
    """
    backend_name = 'abstract'

    def __init__(self, seed_records: Optional[Iterable[PetRecord]] = None):
        self.seed_records = list(seed_records) if seed_records is not None else load_seed_records()

    @abstractmethod
    def _read_raw(self) -> Any:
        """저장된 원시 값을 반환합니다. 저장된 것이 없으면 None."""

    @abstractmethod
    def _write_raw(self, payload: List[dict]) -> None:
        """직렬화된 레코드 배열을 저장합니다."""

    def list(self) -> List[PetRecord]:
        """저장된 목록을 읽습니다. 읽기 실패는 치명적이지 않으며 시드 목록으로 대체됩니다."""
        try:
            raw = self._read_raw()
        except Exception as e:
            logger.warning(f"[{self.backend_name}] Failed to read tamagochi records, using seeds: {e}")
            return list(self.seed_records)

        if not isinstance(raw, list):
            return list(self.seed_records)

        return sanitise_records(raw) or list(self.seed_records)

    def upsert(self, name: str) -> List[PetRecord]:
        """
        이름을 등록합니다.
        같은 비교 키가 이미 있으면 표기만 최신 입력으로 덮어쓰고(생성 시각 유지),
        없으면 현재 시각으로 새 레코드를 추가합니다.
        """
        trimmed = normalise_name(name)
        if not trimmed:
            return self.list()

        records = self.list()
        key = comparison_key(trimmed)
        index = next((i for i, record in enumerate(records) if record.key == key), None)

        if index is not None:
            if records[index].name == trimmed:
                return records
            records[index] = records[index].with_name(trimmed)
            logger.info(f"[{self.backend_name}] Tamagochi renamed in place: {trimmed!r}")
            return self._commit(records)

        records.append(PetRecord(name=trimmed, created_at=DateTimeUtils.now()))
        logger.info(f"[{self.backend_name}] Tamagochi registered: {trimmed!r}")
        return self._commit(records)

    def remove(self, name: str) -> List[PetRecord]:
        """비교 키가 같은 레코드를 지웁니다. 목록이 비면 시드 목록이 저장됩니다."""
        key = comparison_key(name)
        records = self.list()
        remaining = [record for record in records if record.key != key]
        if len(remaining) == len(records):
            return records

        logger.info(f"[{self.backend_name}] Tamagochi removed: {normalise_name(name)!r}")
        return self._commit(remaining)

    def _commit(self, records: Iterable[PetRecord]) -> List[PetRecord]:
        sanitised = sanitise_records(record.to_dict() for record in records)
        if not sanitised:
            sanitised = list(self.seed_records)

        try:
            self._write_raw([record.to_dict() for record in sanitised])
        except Exception as e:
            logger.error(f"[{self.backend_name}] Failed to write tamagochi records: {e}", exc_info=True)
            raise StorageError("A tamagochi lista mentése nem sikerült.") from e

        return list(sanitised)


class MemoryTamagochiStore(TamagochiStore):
    """프로세스 메모리 저장소. 상태는 이 인스턴스에만 속합니다."""
    backend_name = 'memory'

    def __init__(self, seed_records: Optional[Iterable[PetRecord]] = None):
        super().__init__(seed_records)
        self._payload: Optional[List[dict]] = None

    def _read_raw(self) -> Any:
        if self._payload is None:
            return None
        return [dict(entry) for entry in self._payload]

    def _write_raw(self, payload: List[dict]) -> None:
        self._payload = [dict(entry) for entry in payload]


class JsonFileTamagochiStore(TamagochiStore):
    """단일 JSON 파일 저장소."""
    backend_name = 'file'

    def __init__(self, path: str, seed_records: Optional[Iterable[PetRecord]] = None):
        super().__init__(seed_records)
        self.path = path

    def _read_raw(self) -> Any:
        if not os.path.exists(self.path):
            return None
        with open(self.path, encoding='utf-8') as f:
            return json.load(f)

    def _write_raw(self, payload: List[dict]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        temp_path = f"{self.path}.tmp"
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(temp_path, self.path)


class FirestoreTamagochiStore(TamagochiStore):
    """
    Firestore 키-값 저장소. 목록 전체를 문서 하나의 'records' 배열로 보관합니다.
    client를 주입하지 않으면 초기화된 firebase_admin 앱의 기본 클라이언트를 사용합니다.
    """
    backend_name = 'firestore'

    def __init__(self, collection: str, document: str, client=None,
                 seed_records: Optional[Iterable[PetRecord]] = None):
        super().__init__(seed_records)
        self.db = client if client is not None else firestore.client()
        self.doc_ref = self.db.collection(collection).document(document)

    def _read_raw(self) -> Any:
        doc = self.doc_ref.get()
        if not doc.exists:
            return None
        return (doc.to_dict() or {}).get('records')

    def _write_raw(self, payload: List[dict]) -> None:
        self.doc_ref.set({'records': payload, 'updated_at': DateTimeUtils.now()})


def build_store(config, firestore_client=None) -> TamagochiStore:
    """설정의 STORAGE_BACKEND 값에 따라 저장소 인스턴스를 생성합니다."""
    backend = (config.get('STORAGE_BACKEND') or 'memory').lower()

    if backend == 'memory':
        return MemoryTamagochiStore()
    if backend == 'file':
        return JsonFileTamagochiStore(config['TAMAGOTCHI_DATA_PATH'])
    if backend == 'firestore':
        return FirestoreTamagochiStore(
            collection=config['FIRESTORE_COLLECTION'],
            document=config['FIRESTORE_DOCUMENT'],
            client=firestore_client
        )

    raise ValueError(f"'{backend}'은(는) 지원하지 않는 저장소 백엔드입니다.")
