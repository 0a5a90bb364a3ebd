"""Unit tests for JsonHookRepository."""

import json
import threading
from pathlib import Path

import pytest

from hookforge.domain.hook.model.hook import Hook
from hookforge.domain.shared.error import (
    HookAlreadyExistsError,
    HookNotFoundError,
    StorageError,
)
from hookforge.infrastructure.persistence.repository.hook import JsonHookRepository


def _make_hook(id: str = "ci", **overrides) -> Hook:
    fields = {
        "id": id,
        "name": "CI",
        "token": "abc123",
        "flag_file": "proj/flag.txt",
        "enabled": True,
    }
    fields.update(overrides)
    return Hook(**fields)


class TestConstruction:
    def test_missing_file_is_created_empty(self, store_path: Path):
        repo = JsonHookRepository(store_path)

        assert store_path.exists()
        assert json.loads(store_path.read_text()) == []
        assert repo.get_all() == []

    def test_empty_file_loads_as_empty_collection(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("")

        repo = JsonHookRepository(store_path)

        assert repo.get_all() == []

    def test_null_file_loads_as_empty_collection(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("null\n")

        repo = JsonHookRepository(store_path)

        assert repo.get_all() == []

    def test_null_file_is_rewritten_as_array_on_first_mutation(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("null")
        repo = JsonHookRepository(store_path)

        repo.create(_make_hook())

        assert [r["id"] for r in json.loads(store_path.read_text())] == ["ci"]

    def test_corrupt_file_raises_storage_error(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{not json")

        with pytest.raises(StorageError, match="failed to decode hooks file"):
            JsonHookRepository(store_path)

    def test_duplicate_ids_in_file_keep_last(self, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(
            json.dumps(
                [
                    {"id": "a", "name": "first", "flag_file": "a.txt"},
                    {"id": "a", "name": "second", "flag_file": "a.txt"},
                ]
            )
        )

        repo = JsonHookRepository(store_path)

        assert len(repo.get_all()) == 1
        assert repo.get_by_id("a").name == "second"

    def test_reload_returns_persisted_hooks(self, store_path: Path):
        JsonHookRepository(store_path).create(_make_hook())

        reloaded = JsonHookRepository(store_path)

        hook = reloaded.get_by_id("ci")
        assert hook.name == "CI"
        assert hook.flag_file == "proj/flag.txt"
        assert hook.created_at is not None


class TestPersistedFormat:
    def test_file_is_json_array_with_snake_case_fields(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook(description="runs CI"))

        records = json.loads(store_path.read_text())

        assert isinstance(records, list)
        assert set(records[0]) == {
            "id",
            "name",
            "description",
            "token",
            "flag_file",
            "enabled",
            "created_at",
            "updated_at",
        }
        assert records[0]["flag_file"] == "proj/flag.txt"

    def test_no_temp_files_left_behind(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook("a"))
        repo.update(_make_hook("a", name="renamed"))
        repo.delete("a")

        assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]


class TestCreate:
    def test_round_trip_sets_equal_timestamps(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        original = _make_hook(description="desc")

        repo.create(original)
        stored = repo.get_by_id("ci")

        assert stored.created_at is not None
        assert stored.created_at == stored.updated_at
        assert stored.model_dump(exclude={"created_at", "updated_at"}) == original.model_dump(
            exclude={"created_at", "updated_at"}
        )

    def test_duplicate_id_rejected_and_original_kept(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook(name="first"))

        with pytest.raises(HookAlreadyExistsError):
            repo.create(_make_hook(name="second"))

        assert repo.get_by_id("ci").name == "first"

    def test_caller_object_is_not_aliased(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        hook = _make_hook()
        repo.create(hook)

        hook.name = "mutated after create"

        assert repo.get_by_id("ci").name == "CI"


class TestReadSnapshots:
    def test_mutating_returned_hook_does_not_change_registry(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook())

        snapshot = repo.get_by_id("ci")
        snapshot.enabled = False
        for hook in repo.get_all():
            hook.token = "changed"

        stored = repo.get_by_id("ci")
        assert stored.enabled is True
        assert stored.token == "abc123"

    def test_get_missing_raises_not_found(self, store_path: Path):
        repo = JsonHookRepository(store_path)

        with pytest.raises(HookNotFoundError):
            repo.get_by_id("nope")


class TestUpdate:
    def test_update_refreshes_updated_at_and_keeps_created_at(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        created = repo.create(_make_hook())

        updated = repo.update(_make_hook(name="CI v2"))

        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at
        assert repo.get_by_id("ci").name == "CI v2"

    def test_successive_updates_strictly_increase(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook())

        stamps = [repo.update(_make_hook(name=f"v{i}")).updated_at for i in range(5)]

        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_update_fully_replaces_record(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook(description="old description"))

        repo.update(_make_hook(description=""))

        assert repo.get_by_id("ci").description == ""

    def test_update_ignores_caller_supplied_created_at(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        created = repo.create(_make_hook())
        tampered = _make_hook(created_at="2000-01-01T00:00:00Z")

        repo.update(tampered)

        assert repo.get_by_id("ci").created_at == created.created_at

    def test_update_missing_raises_not_found(self, store_path: Path):
        repo = JsonHookRepository(store_path)

        with pytest.raises(HookNotFoundError):
            repo.update(_make_hook())


class TestDelete:
    def test_delete_then_get_and_delete_fail(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook())

        repo.delete("ci")

        with pytest.raises(HookNotFoundError):
            repo.get_by_id("ci")
        with pytest.raises(HookNotFoundError):
            repo.delete("ci")
        assert json.loads(store_path.read_text()) == []


class TestFlushFailure:
    """A failed flush must not leave the in-memory map ahead of the file."""

    @pytest.fixture
    def failing_replace(self, monkeypatch):
        def _raise(self, target):
            raise OSError("disk full")

        return lambda: monkeypatch.setattr(Path, "replace", _raise)

    def test_failed_create_is_rolled_back(self, store_path: Path, failing_replace):
        repo = JsonHookRepository(store_path)
        failing_replace()

        with pytest.raises(StorageError, match="disk full"):
            repo.create(_make_hook())

        with pytest.raises(HookNotFoundError):
            repo.get_by_id("ci")

    def test_failed_update_keeps_previous_record(self, store_path: Path, failing_replace):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook())
        failing_replace()

        with pytest.raises(StorageError):
            repo.update(_make_hook(name="never stored"))

        assert repo.get_by_id("ci").name == "CI"
        assert json.loads(store_path.read_text())[0]["name"] == "CI"

    def test_failed_delete_keeps_record(self, store_path: Path, failing_replace):
        repo = JsonHookRepository(store_path)
        repo.create(_make_hook())
        failing_replace()

        with pytest.raises(StorageError):
            repo.delete("ci")

        assert repo.get_by_id("ci").id == "ci"

    def test_failed_write_removes_temp_file(self, store_path: Path, failing_replace):
        repo = JsonHookRepository(store_path)
        failing_replace()

        with pytest.raises(StorageError):
            repo.create(_make_hook())

        assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]


class TestConcurrency:
    def test_concurrent_creates_all_persist(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        errors: list[Exception] = []

        def worker(n: int) -> None:
            try:
                for i in range(10):
                    repo.create(_make_hook(f"hook-{n}-{i}"))
                    repo.get_all()
            except Exception as e:  # collected for the assertion below
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(repo.get_all()) == 80
        assert len(JsonHookRepository(store_path).get_all()) == 80

    def test_concurrent_create_same_id_exactly_one_wins(self, store_path: Path):
        repo = JsonHookRepository(store_path)
        results: list[str] = []
        barrier = threading.Barrier(6)

        def worker(n: int) -> None:
            barrier.wait()
            try:
                repo.create(_make_hook(name=f"writer-{n}"))
                results.append("ok")
            except HookAlreadyExistsError:
                results.append("exists")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("exists") == 5
