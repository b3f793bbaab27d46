# tamagochi/models/test_pet_record.py
from datetime import datetime, timezone

from tamagochi.models.pet_record import PetRecord, comparison_key, names_equal, sanitise_records


def test_comparison_key_ignores_whitespace_and_case():
    assert comparison_key("  Pixel Panni ") == comparison_key("pixel panni")
    assert names_equal("RENDER RÓKA", "render róka")
    assert not names_equal("Pixel Panni", "Pixel Peti")


def test_from_dict_rejects_malformed_entries():
    assert PetRecord.from_dict(None) is None
    assert PetRecord.from_dict("Pixel Panni") is None
    assert PetRecord.from_dict({"name": 42, "createdAt": "2024-01-12T08:30:00.000Z"}) is None
    assert PetRecord.from_dict({"name": "   ", "createdAt": "2024-01-12T08:30:00.000Z"}) is None
    assert PetRecord.from_dict({"name": "Pixel Panni", "createdAt": "tegnap"}) is None
    assert PetRecord.from_dict({"name": "Pixel Panni"}) is None


def test_from_dict_trims_and_normalises_timestamp():
    record = PetRecord.from_dict({"name": "  Pixel Panni ", "createdAt": "2024-01-12T09:30:00+01:00"})

    assert record.name == "Pixel Panni"
    assert record.created_at == datetime(2024, 1, 12, 8, 30, tzinfo=timezone.utc)
    assert record.to_dict() == {"name": "Pixel Panni", "createdAt": "2024-01-12T08:30:00.000Z"}


def test_sanitise_records_filters_and_sorts_by_creation():
    records = sanitise_records([
        {"name": "Synth Sanyi", "createdAt": "2024-03-22T10:05:00.000Z"},
        {"name": "", "createdAt": "2024-01-01T00:00:00.000Z"},
        ["nem", "objektum"],
        {"name": "Render Róka", "createdAt": "2023-11-03T18:15:00.000Z"},
    ])

    assert [record.name for record in records] == ["Render Róka", "Synth Sanyi"]


def test_with_name_keeps_creation_time():
    record = PetRecord(name="Pixel Panni", created_at=datetime(2024, 1, 12, tzinfo=timezone.utc))
    renamed = record.with_name("PIXEL PANNI")

    assert renamed.name == "PIXEL PANNI"
    assert renamed.created_at == record.created_at
    assert renamed.key == record.key
