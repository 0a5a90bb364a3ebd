"""Centralized error transformation for API routes.

Maps hookforge errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any, assert_never

from fastapi import HTTPException

from hookforge.domain.shared.error import ErrorKind, HookforgeError, ValidationError


def status_for(kind: ErrorKind) -> int:
    """HTTP status for an error kind. Adding a kind without a case fails type checking."""
    match kind:
        case ErrorKind.NOT_FOUND:
            return 404
        case ErrorKind.ALREADY_EXISTS:
            return 409
        case ErrorKind.INVALID_TOKEN:
            return 401
        case ErrorKind.DISABLED:
            return 403
        case ErrorKind.VALIDATION:
            return 400
        case ErrorKind.IO:
            return 503
        case _:
            assert_never(kind)


def error_body(code: str, *messages: str) -> dict[str, Any]:
    return {"success": False, "code": code, "errors": list(messages)}


def map_hookforge_error(error: HookforgeError) -> HTTPException:
    """Map a hookforge error to an HTTPException.

    Args:
        error: The hookforge error to map.

    Returns:
        HTTPException whose detail is the error envelope.
    """
    detail = error_body(error.code, error.message)
    if isinstance(error, ValidationError) and error.field is not None:
        detail["field"] = error.field
    return HTTPException(status_code=status_for(error.kind), detail=detail)
