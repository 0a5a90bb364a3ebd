from datetime import datetime

from hookforge.domain.shared.model.entity import Entity


class Hook(Entity):
    """A named, token-guarded trigger that maps to a flag file.

    Invariants:
    - `id` is unique in the registry and never changes after creation
    - `flag_file` is relative to the flags root and has no `..` segment
      (checked by HookService on save and again on every trigger)
    - `created_at` / `updated_at` are assigned by the registry, never by callers
    """

    id: str
    name: str
    description: str = ""
    token: str = ""
    flag_file: str
    enabled: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
