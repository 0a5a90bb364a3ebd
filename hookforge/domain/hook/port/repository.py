from abc import abstractmethod
from typing import Protocol

from hookforge.domain.hook.model.hook import Hook
from hookforge.domain.shared.port import Port


class HookRepository(Port, Protocol):
    """Durable keyed store of hooks.

    Implementations own their records exclusively. Every hook handed out is a
    snapshot: mutating it has no effect until it is passed back to `update`.
    """

    @abstractmethod
    def get_by_id(self, hook_id: str) -> Hook:
        """Return the hook with this id.

        Raises:
            HookNotFoundError: If no hook has this id
        """
        ...

    @abstractmethod
    def get_all(self) -> list[Hook]: ...

    @abstractmethod
    def create(self, hook: Hook) -> Hook:
        """Store a new hook, stamping `created_at` and `updated_at`.

        Raises:
            HookAlreadyExistsError: If a hook with the same id is stored
        """
        ...

    @abstractmethod
    def update(self, hook: Hook) -> Hook:
        """Replace a stored hook, keeping `created_at` and refreshing `updated_at`.

        Raises:
            HookNotFoundError: If no hook has this id
        """
        ...

    @abstractmethod
    def delete(self, hook_id: str) -> None:
        """Remove a hook.

        Raises:
            HookNotFoundError: If no hook has this id
        """
        ...
