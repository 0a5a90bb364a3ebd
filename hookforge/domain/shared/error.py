"""Error hierarchy for hookforge.

Error layers:
- HookforgeError: Base class for all hookforge errors
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: File system failures of the hook store or flag files (503 responses)

Every concrete error carries an ErrorKind tag. The HTTP layer maps kinds to
status codes with a table that covers every member of the enum.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Closed set of failure conditions a caller can react to."""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_TOKEN = "invalid_token"
    DISABLED = "disabled"
    VALIDATION = "validation"
    IO = "io"


class HookforgeError(Exception):
    """Base class for all hookforge errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.kind.value


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(HookforgeError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Resource already exists."""

    kind = ErrorKind.ALREADY_EXISTS


class ValidationError(DomainError):
    """Input validation failed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthorizationError(DomainError):
    """Caller is not allowed to trigger the hook."""


class HookNotFoundError(NotFoundError):
    def __init__(self, hook_id: str) -> None:
        super().__init__(f"Hook not found: {hook_id}")
        self.hook_id = hook_id


class HookAlreadyExistsError(ConflictError):
    def __init__(self, hook_id: str) -> None:
        super().__init__(f"Hook with ID {hook_id} already exists")
        self.hook_id = hook_id


class InvalidTokenError(AuthorizationError):
    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, hook_id: str) -> None:
        super().__init__("Invalid token")
        self.hook_id = hook_id


class HookDisabledError(AuthorizationError):
    kind = ErrorKind.DISABLED

    def __init__(self, hook_id: str) -> None:
        super().__init__(f"Hook is disabled: {hook_id}")
        self.hook_id = hook_id


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(HookforgeError):
    """Base class for infrastructure/system errors."""

    kind = ErrorKind.IO


class StorageError(InfrastructureError):
    """The hook store file could not be read or written."""


class FlagFileError(InfrastructureError):
    """A flag file could not be created or written."""
