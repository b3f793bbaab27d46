# tamagochi/services/test_storage_service.py
import json
from unittest.mock import MagicMock

import pytest

from tamagochi.models.pet_record import comparison_key
from tamagochi.services.storage_service import (
    FALLBACK_TAMAGOTCHIS,
    FirestoreTamagochiStore,
    JsonFileTamagochiStore,
    MemoryTamagochiStore,
    StorageError,
    build_store,
    load_seed_records,
)


class FakeDocument:
    """Firestore DocumentReference 대역: get/set만 흉내 냅니다."""

    def __init__(self, data=None):
        self.data = data

    def get(self):
        snapshot = MagicMock()
        snapshot.exists = self.data is not None
        snapshot.to_dict.return_value = self.data
        return snapshot

    def set(self, data):
        self.data = data


def make_firestore_store(document=None):
    document = document or FakeDocument()
    client = MagicMock()
    client.collection.return_value.document.return_value = document
    return FirestoreTamagochiStore('tamagochi', 'registry', client=client), document


@pytest.fixture(params=['memory', 'file', 'firestore'])
def any_store(request, tmp_path):
    if request.param == 'memory':
        return MemoryTamagochiStore()
    if request.param == 'file':
        return JsonFileTamagochiStore(str(tmp_path / 'data' / 'tamagotchis.json'))
    store, _ = make_firestore_store()
    return store


def test_empty_store_lists_seeds(any_store):
    names = [record.name for record in any_store.list()]
    assert names == ["Render Róka", "Pixel Panni", "Synth Sanyi"]


def test_repeated_registration_keeps_single_record_with_latest_casing(any_store):
    any_store.upsert("  Pixel Panni ")
    records = any_store.upsert("pixel panni")

    matching = [record for record in records if record.key == comparison_key("Pixel Panni")]
    assert len(matching) == 1
    assert matching[0].name == "pixel panni"
    assert any_store.list() == records


def test_rename_keeps_original_creation_time(any_store):
    original = any_store.upsert("Bitbogár")
    created_at = next(record.created_at for record in original if record.name == "Bitbogár")

    renamed = any_store.upsert("  BITBOGÁR  ")
    record = next(record for record in renamed if record.key == comparison_key("bitbogár"))

    assert record.name == "BITBOGÁR"
    assert record.created_at == created_at


def test_new_registration_is_appended_last(any_store):
    records = any_store.upsert("Neon Nándi")
    assert records[-1].name == "Neon Nándi"
    assert len(records) == len(FALLBACK_TAMAGOTCHIS) + 1


def test_blank_name_is_a_noop(any_store):
    assert any_store.upsert("   ") == any_store.list()


def test_remove_by_comparison_key(any_store):
    any_store.upsert("Neon Nándi")
    records = any_store.remove("  neon nándi ")
    assert "Neon Nándi" not in [record.name for record in records]


def test_remove_unknown_name_is_a_noop(any_store):
    before = any_store.upsert("Neon Nándi")
    assert any_store.remove("Senki") == before


def test_removing_everything_falls_back_to_seeds(any_store):
    for record in any_store.list():
        any_store.remove(record.name)
    assert [record.name for record in any_store.list()] == [record.name for record in FALLBACK_TAMAGOTCHIS]


def test_round_trip_is_backend_independent(tmp_path):
    stores = [
        MemoryTamagochiStore(),
        JsonFileTamagochiStore(str(tmp_path / 'tamagotchis.json')),
        make_firestore_store()[0],
    ]
    results = []
    for store in stores:
        for name in ("Neon Nándi", "pixel PANNI", "Kód Kati"):
            store.upsert(name)
        results.append({record.key for record in store.list()})

    assert results[0] == results[1] == results[2]


def test_file_store_writes_iso_array(tmp_path):
    path = tmp_path / 'nested' / 'tamagotchis.json'
    store = JsonFileTamagochiStore(str(path))
    store.upsert("Neon Nándi")

    stored = json.loads(path.read_text(encoding='utf-8'))
    assert isinstance(stored, list)
    assert stored[-1]['name'] == "Neon Nándi"
    assert stored[-1]['createdAt'].endswith('Z')


@pytest.mark.parametrize('content', ['{ nem json', '{"records": []}', '[]', '[{"name": 1}]'])
def test_file_store_falls_back_on_bad_content(tmp_path, content):
    path = tmp_path / 'tamagotchis.json'
    path.write_text(content, encoding='utf-8')

    store = JsonFileTamagochiStore(str(path))
    assert store.list() == FALLBACK_TAMAGOTCHIS


def test_firestore_store_uses_records_field():
    store, document = make_firestore_store()
    store.upsert("Neon Nándi")

    assert document.data['records'][-1]['name'] == "Neon Nándi"
    assert 'updated_at' in document.data


def test_firestore_read_failure_falls_back_to_seeds():
    store, document = make_firestore_store()
    document.get = MagicMock(side_effect=RuntimeError("unavailable"))
    assert store.list() == FALLBACK_TAMAGOTCHIS


def test_write_failure_raises_storage_error(tmp_path):
    class BrokenStore(MemoryTamagochiStore):
        def _write_raw(self, payload):
            raise OSError("disk full")

    with pytest.raises(StorageError):
        BrokenStore().upsert("Neon Nándi")


def test_seed_loader_falls_back_when_file_missing(tmp_path):
    assert load_seed_records(str(tmp_path / 'missing.json')) == FALLBACK_TAMAGOTCHIS


def test_packaged_seed_file_matches_fallback():
    assert load_seed_records() == FALLBACK_TAMAGOTCHIS


def test_build_store_selects_backend(tmp_path):
    assert isinstance(build_store({'STORAGE_BACKEND': 'memory'}), MemoryTamagochiStore)

    file_store = build_store({'STORAGE_BACKEND': 'file', 'TAMAGOTCHI_DATA_PATH': str(tmp_path / 'x.json')})
    assert isinstance(file_store, JsonFileTamagochiStore)

    firestore_store = build_store(
        {'STORAGE_BACKEND': 'firestore', 'FIRESTORE_COLLECTION': 'c', 'FIRESTORE_DOCUMENT': 'd'},
        firestore_client=MagicMock()
    )
    assert isinstance(firestore_store, FirestoreTamagochiStore)

    with pytest.raises(ValueError):
        build_store({'STORAGE_BACKEND': 'redis'})


def test_memory_stores_do_not_share_state():
    first = MemoryTamagochiStore()
    second = MemoryTamagochiStore()
    first.upsert("Neon Nándi")
    assert "Neon Nándi" not in [record.name for record in second.list()]
