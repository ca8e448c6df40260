"""Tests for shared/storage.py."""

import json

import pytest

from shared.storage import FileStorage, KeyValueStorage, MemoryStorage


class TestMemoryStorage:
    def test_get_missing_key_returns_none(self):
        """Missing keys should read as None."""
        assert MemoryStorage().get_item("pin_session") is None

    def test_set_and_get(self):
        """Stored values should be readable."""
        storage = MemoryStorage()
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"

    def test_remove_is_idempotent(self):
        """Removing a missing key should not raise."""
        storage = MemoryStorage({"a": "1"})
        storage.remove_item("a")
        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_apply_sets_and_deletes(self):
        """apply should write values and delete keys mapped to None."""
        storage = MemoryStorage({"a": "1", "b": "2"})
        storage.apply({"a": None, "c": "3"})
        assert sorted(storage.keys()) == ["b", "c"]
        assert storage.get_item("c") == "3"

    def test_satisfies_protocol(self):
        """MemoryStorage should satisfy KeyValueStorage."""
        assert isinstance(MemoryStorage(), KeyValueStorage)


class TestFileStorage:
    @pytest.fixture
    def path(self, tmp_path):
        return tmp_path / "nested" / "session.json"

    def test_missing_file_reads_empty(self, path):
        """A file that doesn't exist yet should read as empty."""
        assert FileStorage(path).get_item("a") is None

    def test_set_creates_file(self, path):
        """Writing should create the parent directory and file."""
        storage = FileStorage(path)
        storage.set_item("a", "1")
        assert json.loads(path.read_text()) == {"a": "1"}

    def test_values_shared_between_instances(self, path):
        """A second instance on the same file should see the writes."""
        FileStorage(path).set_item("a", "1")
        assert FileStorage(path).get_item("a") == "1"

    def test_apply_is_one_write(self, path):
        """apply should write the whole batch in one document."""
        storage = FileStorage(path)
        storage.apply({"a": "1", "b": "2"})
        storage.apply({"a": None, "b": "3"})
        assert json.loads(path.read_text()) == {"b": "3"}

    def test_corrupt_file_reads_empty(self, path):
        """An unreadable file should be treated as empty."""
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        storage = FileStorage(path)
        assert storage.get_item("a") is None
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"

    def test_non_object_file_reads_empty(self, path):
        """A JSON document that isn't an object should be treated as empty."""
        path.parent.mkdir(parents=True)
        path.write_text("[1, 2]")
        assert FileStorage(path).get_item("a") is None

    def test_no_temp_files_left_behind(self, path):
        """Atomic replace should not leave temp files."""
        storage = FileStorage(path)
        storage.set_item("a", "1")
        storage.set_item("a", "2")
        assert [p.name for p in path.parent.iterdir()] == ["session.json"]

    def test_expands_user_path(self):
        """~ should be expanded."""
        assert "~" not in str(FileStorage("~/.storefy/session.json").path)

    def test_satisfies_protocol(self, path):
        """FileStorage should satisfy KeyValueStorage."""
        assert isinstance(FileStorage(path), KeyValueStorage)
