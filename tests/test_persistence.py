import json
import logging

import pytest

from palabras.db.blob_store import (
    InMemoryBlobStore, JsonFileBlobStore, OutcomeRepository, RecordRepository, SettingsRepository
)
from palabras.models.schemas import DifficultySettings


class BrokenStore:
    """Хранилище, которое всегда падает (переполненный localStorage и т.п.)."""

    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise OSError("quota exceeded")


class TestSettingsRepository:

    def test_missing_returns_defaults(self, store):
        assert SettingsRepository(store, "kid").load() == DifficultySettings()

    def test_round_trip(self, store):
        repo = SettingsRepository(store, "kid")
        settings = DifficultySettings(max_options=3, font_size="extra-large", dyslexia_friendly=True)

        repo.save(settings)

        assert repo.load() == settings
        assert json.loads(store.get("kid:settings"))["fontSize"] == "extra-large"

    def test_partial_data_is_merged_with_defaults(self, store):
        store.set("kid:settings", json.dumps({"showHints": True}))

        settings = SettingsRepository(store, "kid").load()

        assert settings.show_hints is True
        assert settings.max_options == 4

    @pytest.mark.parametrize("raw", [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"maxOptions": 42}),
        json.dumps({"fontSize": "huge"}),
    ])
    def test_corrupt_data_falls_back_to_defaults(self, store, raw, caplog):
        store.set("kid:settings", raw)

        with caplog.at_level(logging.WARNING):
            settings = SettingsRepository(store, "kid").load()

        assert settings == DifficultySettings()
        assert caplog.records

    def test_broken_store_never_raises(self):
        repo = SettingsRepository(BrokenStore(), "kid")

        assert repo.load() == DifficultySettings()
        repo.save(DifficultySettings(max_options=2))


class TestRecordRepository:

    def test_round_trip_parses_timestamps(self, store, scheduler, now):
        repo = RecordRepository(store, "kid")
        record = scheduler.update_record(scheduler.create_record("perro", now=now), True, now=now)

        repo.save({"perro": record})
        loaded = repo.load()

        assert loaded == {"perro": record}
        raw = json.loads(store.get("kid:items"))["perro"]
        assert raw["nextDue"].startswith("2026-10-18T12:00:00")
        assert raw["correctStreak"] == 1

    def test_naive_timestamps_are_read_as_utc(self, store, now):
        store.set("kid:items", json.dumps({"gato": {
            "itemId": "gato", "level": 2, "nextDue": "2026-10-17T12:00:00",
            "lastSeen": "2026-10-10T12:00:00", "correctStreak": 0,
            "incorrectCount": 1, "totalAttempts": 4,
        }}))

        record = RecordRepository(store, "kid").load()["gato"]

        assert record.next_due == now
        assert record.level == 2

    @pytest.mark.parametrize("raw", ["", "null", "[]", "\"items\"", "{broken"])
    def test_malformed_data_gives_empty(self, store, raw):
        store.set("kid:items", raw)
        assert RecordRepository(store, "kid").load() == {}

    def test_bad_entries_are_skipped(self, store, scheduler, now):
        good = scheduler.create_record("perro", now=now).model_dump(mode="json", by_alias=True)
        store.set("kid:items", json.dumps({
            "perro": good,
            "gato": {"itemId": "gato", "level": 9},
            "sol": "garbage",
        }))

        assert list(RecordRepository(store, "kid").load()) == ["perro"]

    def test_broken_store_never_raises(self, scheduler):
        repo = RecordRepository(BrokenStore(), "kid")

        assert repo.load() == {}
        repo.save({"perro": scheduler.create_record("perro")})


class TestOutcomeRepository:

    def test_round_trip(self, store):
        repo = OutcomeRepository(store, "kid")
        repo.save([True, False, True])
        assert repo.load() == [True, False, True]

    def test_malformed_gives_empty(self, store):
        store.set("kid:outcomes", json.dumps([1, "x"]))
        assert OutcomeRepository(store, "kid").load() == []


class TestJsonFileBlobStore:

    def test_persists_across_instances(self, tmp_path):
        JsonFileBlobStore(tmp_path).set("kid:settings", "{\"showHints\": true}")

        reopened = JsonFileBlobStore(tmp_path)

        assert reopened.get("kid:settings") == "{\"showHints\": true}"
        assert SettingsRepository(reopened, "kid").load().show_hints is True

    def test_missing_key(self, tmp_path):
        assert JsonFileBlobStore(tmp_path).get("nobody:items") is None

    def test_keys_are_isolated_per_learner(self, tmp_path):
        store = JsonFileBlobStore(tmp_path)
        SettingsRepository(store, "ana").save(DifficultySettings(max_options=2))

        assert SettingsRepository(store, "bram").load() == DifficultySettings()
        assert SettingsRepository(store, "ana").load().max_options == 2

    @pytest.mark.parametrize("first,second", [
        ("jan:1", "jan_1"),
        ("a/b", "a_b"),
        ("ana%3A", "ana:"),
    ])
    def test_similar_learner_ids_do_not_share_files(self, tmp_path, first, second):
        store = JsonFileBlobStore(tmp_path)
        SettingsRepository(store, first).save(DifficultySettings(max_options=2))

        assert SettingsRepository(store, second).load().max_options == 4
        assert SettingsRepository(store, first).load().max_options == 2
        assert len(list(tmp_path.glob("*.json"))) == 1


def test_in_memory_store():
    store = InMemoryBlobStore()
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"
