"""Tests for the history log, its storage and the theme preference."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest

from clueai.client.history import HISTORY_KEY, HISTORY_LIMIT, HistoryItem, HistoryStore
from clueai.client.preferences import THEME_KEY, ThemeMode, ThemePreference
from clueai.client.storage import JsonFileStorage, MemoryStorage, StorageError
from clueai.schemas.assist import ImageAttachment, SubjectMode


class BrokenStorage:
    """Storage whose every operation fails."""

    def read(self, key):
        raise StorageError("disk on fire")

    def write(self, key, value):
        raise StorageError("disk on fire")

    def clear(self, key):
        raise StorageError("disk on fire")


def fixed_clock(start=1_700_000_000_000):
    return lambda: start


def make_store(storage=None, **kwargs):
    kwargs.setdefault("now", lambda: datetime(2026, 10, 17, 14, 5, 9))
    return HistoryStore(storage if storage is not None else MemoryStorage(), **kwargs)


def record(store, n=0, **overrides):
    fields = dict(
        mode=SubjectMode.CS,
        ask=f"question {n}",
        code=f"code {n}",
        images=[],
        ai_text=f"answer {n}",
    )
    fields.update(overrides)
    return store.record(**fields)


class TestHistoryStore:
    def test_record_prepends_newest_first(self):
        store = make_store()

        record(store, 1)
        record(store, 2)

        assert [item.ask for item in store.items] == ["question 2", "question 1"]

    def test_capped_at_ten_dropping_oldest(self):
        store = make_store()

        for n in range(1, 12):
            record(store, n)

        assert len(store) == HISTORY_LIMIT == 10
        assert store.items[0].ask == "question 11"
        assert store.items[-1].ask == "question 2"

    def test_snapshot_isolated_from_live_inputs(self):
        store = make_store()
        images = [ImageAttachment(name="a.png", src="data:image/png;base64,AAA")]
        code = "x = 1"

        item = record(store, images=images, code=code)
        images.append(ImageAttachment(name="b.png", src="data:image/png;base64,BBB"))
        images[0] = ImageAttachment(name="changed.png", src="")
        code += "\ny = 2"

        assert item.code == "x = 1"
        assert item.images == (ImageAttachment(name="a.png", src="data:image/png;base64,AAA"),)
        assert store.items[0] is item

    def test_items_are_frozen(self):
        item = record(make_store())

        with pytest.raises(AttributeError):
            item.ai_text = "edited"

    def test_ids_unique_within_same_millisecond(self):
        store = make_store(clock=fixed_clock())

        first = record(store, 1)
        second = record(store, 2)

        assert second.id > first.id

    def test_timestamp_from_clock(self):
        item = record(make_store())

        assert item.timestamp == "10/17/2026, 02:05:09 PM"

    def test_persisted_after_each_change(self):
        storage = MemoryStorage()
        store = make_store(storage)

        record(store, 1, mode=SubjectMode.MATH)

        stored = json.loads(storage.read(HISTORY_KEY))
        assert len(stored) == 1
        assert stored[0]["mode"] == "math"
        assert stored[0]["aiText"] == "answer 1"
        assert set(stored[0]) == {"id", "timestamp", "mode", "ask", "code", "images", "aiText"}

    def test_loaded_once_from_storage(self):
        storage = MemoryStorage()
        record(make_store(storage), 1, images=[ImageAttachment(name="a.png", src="data:x")])

        reloaded = make_store(storage)

        assert len(reloaded) == 1
        assert reloaded.items[0].images[0].name == "a.png"
        assert reloaded.items[0].mode is SubjectMode.CS

    def test_clear_empties_and_removes_persisted_copy(self):
        storage = MemoryStorage()
        store = make_store(storage)
        record(store, 1)

        store.clear()

        assert len(store) == 0
        assert HISTORY_KEY not in storage.keys()

    @pytest.mark.parametrize("raw", ["not json", '{"id": 1}', "[1, 2]", '[{"no_id": true}]'])
    def test_corrupt_history_loads_empty(self, raw):
        storage = MemoryStorage({HISTORY_KEY: raw})

        with patch("clueai.client.history.logger") as logger:
            store = make_store(storage)

        assert len(store) == 0
        logger.error.assert_called_once()

    def test_storage_failures_are_not_raised(self):
        with patch("clueai.client.history.logger") as logger:
            store = make_store(BrokenStorage())
            record(store, 1)
            store.clear()

        assert len(store) == 0
        assert logger.error.call_count == 3


class TestHistoryItem:
    def test_round_trip_through_dict(self):
        item = HistoryItem(
            id=5,
            timestamp="t",
            mode=SubjectMode.ENGLISH,
            ask="why",
            code="essay",
            images=(ImageAttachment(name="p.png", src="data:p"),),
            ai_text="look at paragraph 2",
        )

        assert HistoryItem.from_dict(item.to_dict()) == item


class TestJsonFileStorage:
    def test_missing_file_reads_none(self, tmp_path):
        assert JsonFileStorage(tmp_path / "missing.json").read("k") is None

    def test_write_read_clear(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        storage = JsonFileStorage(path)

        storage.write("a", "1")
        storage.write("b", "2")
        storage.clear("a")

        assert storage.read("a") is None
        assert storage.read("b") == "2"
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(StorageError):
            JsonFileStorage(path).read("k")

    def test_history_survives_corrupt_file(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[]", encoding="utf-8")

        store = make_store(JsonFileStorage(path))

        assert len(store) == 0


class TestThemePreference:
    def test_default_is_dark(self):
        assert ThemePreference(MemoryStorage()).theme is ThemeMode.DARK

    def test_loads_stored_theme(self):
        storage = MemoryStorage({THEME_KEY: "light"})

        assert ThemePreference(storage).theme is ThemeMode.LIGHT

    def test_unknown_value_falls_back(self):
        storage = MemoryStorage({THEME_KEY: "sepia"})

        assert ThemePreference(storage).theme is ThemeMode.DARK

    def test_set_persists(self):
        storage = MemoryStorage()
        pref = ThemePreference(storage)

        pref.toggle()

        assert storage.read(THEME_KEY) == "light"
        assert ThemePreference(storage).theme is ThemeMode.LIGHT

    def test_storage_failure_ignored(self):
        pref = ThemePreference(BrokenStorage())

        assert pref.set("light") is ThemeMode.LIGHT
