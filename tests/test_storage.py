import json
import logging

from core.catalog import ReferenceCatalog
from core.corrections import DEFAULT_SETTINGS
from core.models.domain import AngleTag, CorrectionMode, CorrectionSettings
from core.storage import (
    CATALOG_KEY,
    SELECTION_KEY,
    SETTINGS_KEY,
    CatalogStore,
    JsonFileStorage,
    MemoryStorage,
    PackSelectionStore,
    SettingsStore,
    load_catalog,
)


def test_empty_storage_falls_back_to_defaults(memory_storage):
    catalog = load_catalog(CatalogStore(memory_storage), PackSelectionStore(memory_storage))
    assert [p.name for p in catalog.packs] == ["Standard Anime Eyes", "Profile Jawlines"]
    assert catalog.enabled_pack_ids == [p.id for p in catalog.packs]
    assert SettingsStore(memory_storage).load() == DEFAULT_SETTINGS


def test_corrupt_records_fall_back_silently(caplog):
    storage = MemoryStorage({CATALOG_KEY: "{not json", SETTINGS_KEY: "[1, 2", SELECTION_KEY: "oops"})
    with caplog.at_level(logging.WARNING):
        catalog = load_catalog(CatalogStore(storage), PackSelectionStore(storage))
        settings = SettingsStore(storage).load()
    assert len(catalog.packs) == 2
    assert len(catalog.enabled_pack_ids) == 2
    assert settings == DEFAULT_SETTINGS
    assert "not valid JSON" in caplog.text


def test_structurally_invalid_catalog_falls_back():
    storage = MemoryStorage({CATALOG_KEY: json.dumps([{"name": "no id"}])})
    assert [p.name for p in CatalogStore(storage).load()] == ["Standard Anime Eyes", "Profile Jawlines"]


def test_catalog_round_trip_preserves_images(memory_storage, gradient_png):
    catalog = ReferenceCatalog()
    pack = catalog.add_pack("Faces", "Front faces")
    catalog.add_images(pack.id, [gradient_png], tags=["Front", "eyes"])
    store = CatalogStore(memory_storage)
    store.save(catalog)

    (loaded,) = store.load()
    assert loaded.id == pack.id
    assert loaded.description == "Front faces"
    assert loaded.images[0].data == gradient_png
    assert loaded.images[0].tags == frozenset({"Front", "eyes"})
    assert loaded.images[0].similarity is None
    assert "similarity" not in memory_storage.data[CATALOG_KEY]


def test_settings_round_trip(memory_storage):
    store = SettingsStore(memory_storage)
    settings = CorrectionSettings(strength=12, mode=CorrectionMode.CONDITIONED, angle_tag=AngleTag.UPSHOT)
    store.save(settings)
    assert store.load() == settings


def test_settings_invalid_fields_fall_back_individually():
    legacy = {"strength": 70, "mode": "Bogus", "angleTag": "Profile", "scope": 3, "extra": "ignored"}
    storage = MemoryStorage({SETTINGS_KEY: json.dumps(legacy)})
    settings = SettingsStore(storage).load()
    assert settings.strength == 70
    assert settings.angle_tag is AngleTag.PROFILE
    assert settings.mode is DEFAULT_SETTINGS.mode
    assert settings.scope is DEFAULT_SETTINGS.scope


def test_selection_round_trip_and_invalid_record(memory_storage):
    catalog = ReferenceCatalog.with_seed_packs()
    catalog.disable(catalog.packs[0].id)
    store = PackSelectionStore(memory_storage)
    store.save(catalog)
    assert store.load() == [catalog.packs[1].id]

    memory_storage.write(SELECTION_KEY, json.dumps({"ids": []}))
    assert store.load() is None


def test_selection_of_unknown_packs_is_dropped():
    storage = MemoryStorage({SELECTION_KEY: json.dumps(["seed-profile-jawlines", "deleted-pack"])})
    catalog = load_catalog(CatalogStore(storage), PackSelectionStore(storage))
    assert catalog.enabled_pack_ids == ["seed-profile-jawlines"]


def test_json_file_storage(tmp_path):
    storage = JsonFileStorage(tmp_path / "state")
    assert storage.read("selected_packs") is None
    storage.write("selected_packs", "[]")
    assert (tmp_path / "state" / "selected_packs.json").read_text(encoding="utf-8") == "[]"
    assert storage.read("selected_packs") == "[]"


def test_unreadable_file_falls_back(tmp_path):
    storage = JsonFileStorage(tmp_path)
    (tmp_path / f"{SETTINGS_KEY}.json").mkdir()
    assert SettingsStore(storage).load() == DEFAULT_SETTINGS


def test_infinite_strength_record_clamps():
    storage = MemoryStorage({SETTINGS_KEY: '{"strength": Infinity, "line_preservation": -1e999, "angleTag": "Upshot"}'})
    settings = SettingsStore(storage).load()
    assert settings.strength == 100
    assert settings.line_preservation == 0
    assert settings.angle_tag is AngleTag.UPSHOT
