"""Tests for BookmarkStore."""

import logging
from unittest.mock import MagicMock

from lingua_reader.exceptions import PersistenceError
from lingua_reader.services.bookmark_store import BookmarkStore
from lingua_reader.services.key_value_store import InMemoryKeyValueStore, JsonKeyValueStore


class TestToggle:
    """Tests for toggle and is_bookmarked."""

    def test_toggle_adds_then_removes(self):
        store = BookmarkStore(InMemoryKeyValueStore())

        assert store.toggle(12, 3) is True
        assert store.is_bookmarked(12, 3)
        assert store.toggle(12, 3) is False
        assert not store.is_bookmarked(12, 3)

    def test_toggle_twice_restores_membership(self):
        """Toggle is its own inverse, starting from either state."""
        store = BookmarkStore(InMemoryKeyValueStore({"bookmarks_12": [1, 4]}))

        for index in (1, 2):
            before = store.is_bookmarked(12, index)
            store.toggle(12, index)
            store.toggle(12, index)
            assert store.is_bookmarked(12, index) == before

    def test_resources_are_independent(self):
        store = BookmarkStore(InMemoryKeyValueStore())
        store.toggle(1, 0)
        assert not store.is_bookmarked(2, 0)

    def test_int_and_str_ids_are_the_same_resource(self):
        store = BookmarkStore(InMemoryKeyValueStore())
        store.toggle(7, 2)
        assert store.is_bookmarked("7", 2)


class TestPersistence:
    """Tests for write-through persistence."""

    def test_writes_sorted_list_under_prefixed_key(self):
        backend = InMemoryKeyValueStore()
        store = BookmarkStore(backend)

        store.toggle(12, 5)
        store.toggle(12, 1)

        assert backend.read("bookmarks_12") == [1, 5]

    def test_get_returns_sorted_indices(self):
        store = BookmarkStore(InMemoryKeyValueStore({"bookmarks_3": [9, 2, 4]}))
        assert store.get(3) == [2, 4, 9]

    def test_survives_restart_with_json_backend(self, tmp_path):
        path = tmp_path / "bookmarks.json"
        BookmarkStore(JsonKeyValueStore(path)).toggle(12, 8)

        reloaded = BookmarkStore(JsonKeyValueStore(path))

        assert reloaded.get(12) == [8]

    def test_clear(self):
        backend = InMemoryKeyValueStore({"bookmarks_4": [1, 2]})
        store = BookmarkStore(backend)

        store.clear(4)

        assert store.get(4) == []
        assert backend.read("bookmarks_4") == []

    def test_ignores_garbage_values(self):
        store = BookmarkStore(InMemoryKeyValueStore({"bookmarks_1": [1, "2", "x", None]}))
        assert store.get(1) == [1, 2]

    def test_write_failure_keeps_session_state(self, caplog):
        """Should log a failed write and keep the in-memory membership."""
        backend = MagicMock()
        backend.read.return_value = []
        backend.write.side_effect = PersistenceError("disk full")
        store = BookmarkStore(backend)

        with caplog.at_level(logging.WARNING):
            assert store.toggle(1, 3) is True

        assert store.is_bookmarked(1, 3)
        assert "Could not save bookmarks" in caplog.text

    def test_read_failure_starts_empty(self):
        backend = MagicMock()
        backend.read.side_effect = PersistenceError("unavailable")
        store = BookmarkStore(backend)
        assert store.get(1) == []
