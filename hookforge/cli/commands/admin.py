"""Administrative commands: admin token management and hook inspection."""

import os
import sys
from pathlib import Path
from typing import Any

import cyclopts
import yaml

from hookforge.cli.console import get_console
from hookforge.config import CONFIG_FILE_ENV, Config, config_file_path, ensure_config_file
from hookforge.domain.hook.service.token import TokenGenerator
from hookforge.domain.shared.error import StorageError
from hookforge.infrastructure.persistence.repository.hook import JsonHookRepository

app = cyclopts.App(name="admin", help="Administrative commands")


def _read_config_file(path: Path) -> dict[str, Any]:
    return yaml.safe_load(path.read_text()) or {}


@app.command
def token(
    config: Path | None = None,
    *,
    yes: bool = False,
) -> None:
    """Generate a new admin token and save it to the config file.

    Creates a default config file first if none exists. The file is edited in
    place, so values coming from environment variables are not written back.

    Args:
        config: Path to the YAML config file. Defaults to HOOKFORGE_CONFIG_FILE
                or config/config.yaml.
        yes: Save without asking for confirmation.
    """
    console = get_console()
    path = ensure_config_file(config or config_file_path())

    data = _read_config_file(path)
    server = data.setdefault("server", {})

    new_token = TokenGenerator().generate()
    console.secret(new_token, title="New admin token")

    current = server.get("admin_token")
    if current:
        console.secret(current, title="Current admin token")

    if not yes:
        response = input("Save this token to the configuration? [y/N] ").strip().lower()
        if response not in ("y", "yes"):
            console.info("Token generation canceled. No changes made to configuration.")
            return

    server["admin_token"] = new_token
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    console.success(f"New admin token saved to {path}")


@app.command
def hooks(config: Path | None = None) -> None:
    """List the hooks in the configured hook store.

    Tokens are not shown.

    Args:
        config: Path to the YAML config file. Overrides HOOKFORGE_CONFIG_FILE.
    """
    console = get_console()

    if config is not None:
        os.environ[CONFIG_FILE_ENV] = str(config.resolve())
    app_config = Config()
    storage_path = app_config.hooks.storage_path

    # Listing must not create the store as a side effect
    if not storage_path.exists():
        console.warning(f"No hooks in {storage_path}")
        return

    try:
        repo = JsonHookRepository(storage_path)
    except StorageError as e:
        console.error(e.message, hint=f"Check {storage_path}")
        sys.exit(1)

    all_hooks = sorted(repo.get_all(), key=lambda h: h.id)
    if not all_hooks:
        console.warning(f"No hooks in {storage_path}")
        return

    console.table(
        [
            {
                "id": h.id,
                "name": h.name,
                "enabled": "yes" if h.enabled else "no",
                "flag_file": h.flag_file,
                "updated_at": h.updated_at.isoformat() if h.updated_at else "",
            }
            for h in all_hooks
        ],
        [
            ("id", "ID"),
            ("name", "Name"),
            ("enabled", "Enabled"),
            ("flag_file", "Flag file"),
            ("updated_at", "Updated"),
        ],
        title=f"Hooks ({len(all_hooks)})",
    )
