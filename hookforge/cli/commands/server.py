"""Server commands."""

import os
import sys
from pathlib import Path

import cyclopts
import uvicorn
from pydantic import ValidationError

from hookforge.cli.console import get_console
from hookforge.config import CONFIG_FILE_ENV, Config

app = cyclopts.App(name="server", help="Server commands")

APP_FACTORY = "hookforge.application.api.rest.app:create_app"


@app.command
def run(
    host: str | None = None,
    port: int | None = None,
    config: Path | None = None,
) -> None:
    """Run the hookforge server in the foreground.

    Args:
        host: Host to bind to. Defaults to server.host from the config.
        port: Port to listen on. Defaults to server.port from the config.
        config: Path to the YAML config file. Overrides HOOKFORGE_CONFIG_FILE.
    """
    console = get_console()

    if config is not None:
        if not config.exists():
            console.error(f"Config file not found: {config}")
            sys.exit(1)
        # The app factory reads its config from the environment
        os.environ[CONFIG_FILE_ENV] = str(config.resolve())

    try:
        app_config = Config()
    except ValidationError as e:
        console.error("Invalid configuration")
        for err in e.errors():
            loc = ".".join(str(x) for x in err.get("loc", []))
            console.print(f"  {loc}: {err.get('msg', 'Unknown error')}")
        sys.exit(1)

    if not app_config.server.admin_token:
        console.warning("No admin token configured; the admin API will refuse all requests")
        console.info("Run 'hookforge admin token' to create one")

    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=host or app_config.server.host,
        port=port or app_config.server.port,
        log_config=None,  # Logging is configured by the app factory
    )
