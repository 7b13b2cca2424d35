"""
Unit tests for the key-value backends and the typed repository.
"""

import json
from datetime import datetime

import pytest

from visual_dex.config import Settings
from visual_dex.delivery.state_store import (
    LANGUAGE_KEY,
    LEARNING_KEY,
    MISSIONS_KEY,
    PROGRESS_KEY,
    QUOTA_KEY,
    InMemoryStore,
    JsonFileStore,
    SqlStore,
    StateRepository,
    build_store,
)
from visual_dex.learning import Complexity, LearningProfile
from visual_dex.missions import Mission, ProgressTotals, QuotaState


@pytest.fixture(params=["memory", "json", "sql"])
def store(request, tmp_path):
    """Every backend must behave the same."""
    if request.param == "memory":
        return InMemoryStore()
    if request.param == "json":
        return JsonFileStore(tmp_path / "blobs")
    return SqlStore(f"sqlite:///{tmp_path / 'state.db'}")


class TestBackends:
    def test_missing_key_is_none(self, store):
        assert store.get("nothing") is None

    def test_set_get_overwrite(self, store):
        store.set("userProgress", '{"points": 1}')
        store.set("userProgress", '{"points": 2}')

        assert store.get("userProgress") == '{"points": 2}'

    def test_remove(self, store):
        store.set("appLanguage", '"es"')
        store.remove("appLanguage")
        store.remove("appLanguage")

        assert store.get("appLanguage") is None

    def test_unicode_values(self, store):
        store.set("learningData", '{"cepillo": "¿Dónde está?"}')

        assert store.get("learningData") == '{"cepillo": "¿Dónde está?"}'


class TestJsonFileStore:
    def test_one_file_per_key(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("photoQuota", "{}")

        assert (tmp_path / "photoQuota.json").read_text(encoding="utf-8") == "{}"
        assert not list(tmp_path.glob("*.tmp"))

    def test_path_traversal_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileStore(tmp_path).set("../escape", "{}")


class TestBuildStore:
    def test_json_backend(self, tmp_path):
        settings = Settings(data_dir=tmp_path, store_backend="json")

        assert isinstance(build_store(settings), JsonFileStore)

    def test_sql_backend_defaults_to_sqlite_in_data_dir(self, tmp_path):
        settings = Settings(data_dir=tmp_path / "data", store_backend="sql")

        store = build_store(settings)

        assert isinstance(store, SqlStore)
        store.set("appLanguage", '"en"')
        assert (tmp_path / "data" / "state.db").exists()


class TestStateRepository:
    def test_defaults_when_empty(self, repository):
        assert len(repository.load_learning()) == 0
        assert repository.load_missions() == ([], None)
        assert repository.load_quota() == QuotaState()
        assert repository.load_progress() == ProgressTotals()
        assert repository.load_language() == "en"
        assert repository.load_welcome_seen() is False

    def test_learning_round_trip(self, repository, now):
        profile = LearningProfile()
        for _ in range(3):
            profile.update("lamp", ["Whenever I look at the lamp, I remember the new words I learned."], now)
        repository.save_learning(profile)

        loaded = repository.load_learning().get("lamp")

        assert loaded.frequency == 3
        assert loaded.patterns.complexity == Complexity.ADVANCED

    def test_missions_stored_with_day(self, repository, memory_store):
        batch = [Mission(id="mission_0", environment_key="garden", object_key="tree")]
        repository.save_missions(batch, "2024-03-15")

        blob = json.loads(memory_store.get(MISSIONS_KEY))
        assert blob["day"] == "2024-03-15"
        assert repository.load_missions() == (batch, "2024-03-15")

    def test_quota_and_progress_round_trip(self, repository):
        quota = QuotaState(photos_used_today=4, day_identity="2024-03-15",
                           cooldown_until=datetime(2024, 3, 15, 22, 0))
        progress = ProgressTotals(points=150, streak_days=2, last_active_day="2024-03-15",
                                  awarded_keys=("2024-03-15:mission_0",))
        repository.save_quota(quota)
        repository.save_progress(progress)

        assert repository.load_quota() == quota
        assert repository.load_progress() == progress

    def test_language_and_welcome(self, repository):
        repository.save_language("es")
        repository.save_welcome_seen()

        assert repository.load_language() == "es"
        assert repository.load_welcome_seen() is True

    @pytest.mark.parametrize(
        "key",
        [LEARNING_KEY, MISSIONS_KEY, QUOTA_KEY, PROGRESS_KEY, LANGUAGE_KEY],
    )
    def test_corrupt_blob_loads_default(self, memory_store, key):
        memory_store.set(key, "{not json")
        repository = StateRepository(memory_store, default_language="en")

        assert len(repository.load_learning()) == 0
        assert repository.load_missions() == ([], None)
        assert repository.load_quota() == QuotaState()
        assert repository.load_progress() == ProgressTotals()
        assert repository.load_language() == "en"

    def test_wrong_shapes_load_default(self, memory_store):
        memory_store.set(LEARNING_KEY, "[1, 2, 3]")
        memory_store.set(MISSIONS_KEY, '{"day": "2024-03-15", "missions": [{"id": "x"}]}')
        memory_store.set(QUOTA_KEY, '"ten"')
        memory_store.set(PROGRESS_KEY, '{"points": -3}')
        memory_store.set(LANGUAGE_KEY, '"klingon"')
        repository = StateRepository(memory_store, default_language="es")

        assert len(repository.load_learning()) == 0
        assert repository.load_missions() == ([], None)
        assert repository.load_quota() == QuotaState()
        assert repository.load_progress() == ProgressTotals()
        assert repository.load_language() == "es"

    def test_entry_with_non_object_patterns_is_skipped(self, memory_store):
        memory_store.set(
            LEARNING_KEY,
            json.dumps(
                {
                    "cup": {"frequency": 2, "lastSeen": "2024-01-01T00:00:00", "patterns": "oops"},
                    "pen": {"frequency": 3, "lastSeen": "2024-01-01T00:00:00"},
                }
            ),
        )

        profile = StateRepository(memory_store).load_learning()

        assert "cup" not in profile
        assert profile.frequency_of("pen") == 3

    def test_offset_timestamps_load_as_naive(self, memory_store):
        stamp = "2024-03-15T09:00:00+02:00"
        memory_store.set(LEARNING_KEY, json.dumps({"cup": {"frequency": 1, "lastSeen": stamp}}))
        memory_store.set(
            MISSIONS_KEY,
            json.dumps(
                {
                    "day": "2024-03-15",
                    "missions": [
                        {"id": "mission_0", "environment": "kitchen", "objectKey": "cup",
                         "completed": True, "completedAt": stamp},
                    ],
                }
            ),
        )
        memory_store.set(QUOTA_KEY, json.dumps({"photosUsedToday": 3, "cooldownUntil": stamp}))
        repository = StateRepository(memory_store)

        missions, _ = repository.load_missions()

        assert repository.load_learning().get("cup").last_seen.tzinfo is None
        assert missions[0].completed_at.tzinfo is None
        assert repository.load_quota().cooldown_until.tzinfo is None

    def test_unreadable_backend_loads_default(self):
        class BrokenStore(InMemoryStore):
            def get(self, key):
                raise OSError("disk on fire")

        repository = StateRepository(BrokenStore())

        assert repository.load_progress() == ProgressTotals()

    def test_clear_learning(self, repository, memory_store, now):
        profile = LearningProfile()
        profile.update("cup", ["This is a cup."], now)
        repository.save_learning(profile)

        repository.clear_learning()

        assert memory_store.get(LEARNING_KEY) is None
