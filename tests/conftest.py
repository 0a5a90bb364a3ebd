"""Global test fixtures."""

import os

import logfire
import pytest

# Keep a developer's config/config.yaml and shell environment out of the tests.
# This must happen at module load time, before any test constructs Config().
_MISSING_CONFIG = os.path.join(os.path.dirname(__file__), "no-such-config.yaml")
os.environ["HOOKFORGE_CONFIG_FILE"] = _MISSING_CONFIG
for _name in list(os.environ):
    if _name.startswith("HOOKFORGE_") and _name != "HOOKFORGE_CONFIG_FILE":
        del os.environ[_name]

logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "hooks.json"


@pytest.fixture
def flags_dir(tmp_path):
    return tmp_path / "flags"
