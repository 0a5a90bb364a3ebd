import logging
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pydantic
from pydantic import TypeAdapter

from hookforge.domain.hook.model.hook import Hook
from hookforge.domain.hook.port.repository import HookRepository
from hookforge.domain.shared.error import (
    HookAlreadyExistsError,
    HookNotFoundError,
    StorageError,
)
from hookforge.infrastructure.persistence.lock import ReadWriteLock

logger = logging.getLogger(__name__)

_hook_list = TypeAdapter(list[Hook])
# A stored JSON null reads as an empty collection
_hook_file = TypeAdapter(list[Hook] | None)


class JsonHookRepository(HookRepository):
    """HookRepository backed by a single JSON file.

    The file holds the whole collection as a JSON array and is read once, at
    construction. After that the in-memory map is authoritative and every
    mutation rewrites the file before the write lock is released. Writes go
    to a temporary file in the same directory which is then renamed over the
    store, so a crash mid-write leaves the previous version intact.
    """

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)
        self._hooks: dict[str, Hook] = {}
        self._lock = ReadWriteLock()

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"failed to create directory: {e}") from e

        if self.file_path.exists():
            self._load()
        else:
            self._save()

    def get_by_id(self, hook_id: str) -> Hook:
        with self._lock.read():
            hook = self._hooks.get(hook_id)
            if hook is None:
                raise HookNotFoundError(hook_id)
            return hook.model_copy(deep=True)

    def get_all(self) -> list[Hook]:
        with self._lock.read():
            return [hook.model_copy(deep=True) for hook in self._hooks.values()]

    def create(self, hook: Hook) -> Hook:
        with self._lock.write():
            if hook.id in self._hooks:
                raise HookAlreadyExistsError(hook.id)

            now = datetime.now(UTC)
            stored = hook.model_copy(deep=True, update={"created_at": now, "updated_at": now})

            self._hooks[stored.id] = stored
            try:
                self._save()
            except StorageError:
                del self._hooks[stored.id]
                raise

            return stored.model_copy(deep=True)

    def update(self, hook: Hook) -> Hook:
        with self._lock.write():
            previous = self._hooks.get(hook.id)
            if previous is None:
                raise HookNotFoundError(hook.id)

            now = datetime.now(UTC)
            # Coarse clocks can repeat; updated_at must still move forward
            if previous.updated_at is not None and now <= previous.updated_at:
                now = previous.updated_at + timedelta(microseconds=1)

            stored = hook.model_copy(
                deep=True,
                update={"created_at": previous.created_at, "updated_at": now},
            )

            self._hooks[stored.id] = stored
            try:
                self._save()
            except StorageError:
                self._hooks[stored.id] = previous
                raise

            return stored.model_copy(deep=True)

    def delete(self, hook_id: str) -> None:
        with self._lock.write():
            previous = self._hooks.pop(hook_id, None)
            if previous is None:
                raise HookNotFoundError(hook_id)

            try:
                self._save()
            except StorageError:
                self._hooks[hook_id] = previous
                raise

    def _load(self) -> None:
        try:
            content = self.file_path.read_bytes()
        except OSError as e:
            raise StorageError(f"failed to open hooks file: {e}") from e

        if not content.strip():
            return

        try:
            hooks = _hook_file.validate_json(content) or []
        except pydantic.ValidationError as e:
            raise StorageError(f"failed to decode hooks file: {e}") from e

        # Duplicate ids in the file collapse to the last occurrence
        for hook in hooks:
            self._hooks[hook.id] = hook

        logger.info("Loaded %d hooks from %s", len(self._hooks), self.file_path)

    def _save(self) -> None:
        data = _hook_list.dump_json(list(self._hooks.values()), indent=2)
        directory = self.file_path.parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{self.file_path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise StorageError(f"failed to create hooks file: {e}") from e

        # Atomic write: write to temp file then rename
        try:
            with open(fd, "wb") as f:
                f.write(data)
                f.write(b"\n")
            Path(tmp_path).replace(self.file_path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise StorageError(f"failed to write hooks file: {e}") from e
