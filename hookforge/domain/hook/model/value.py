"""Value checks shared by hook validation and flag file creation."""

import re
from pathlib import PurePosixPath, PureWindowsPath

from hookforge.domain.shared.error import ValidationError

_SEPARATORS = re.compile(r"[\\/]")


def check_flag_file(flag_file: str) -> None:
    """Reject flag file paths that could land outside the flags root.

    A flag file must be a non-empty relative path without any ``..`` segment.
    Both separators are considered so a backslash cannot smuggle a traversal
    segment past the check.
    """
    if not flag_file:
        raise ValidationError("hook flag file is required", field="flag_file")

    if "\x00" in flag_file:
        raise ValidationError("flag file path must not contain NUL bytes", field="flag_file")

    if (
        PurePosixPath(flag_file).is_absolute()
        or flag_file.startswith("\\")
        or PureWindowsPath(flag_file).is_absolute()
    ):
        raise ValidationError(f"flag file path must be relative: {flag_file}", field="flag_file")

    if ".." in _SEPARATORS.split(flag_file):
        raise ValidationError(
            f"flag file path must not contain '..': {flag_file}", field="flag_file"
        )
