"""Main CLI application using Cyclopts."""

import cyclopts

from hookforge.cli.commands import admin, server

app = cyclopts.App(
    name="hookforge",
    help="hookforge - token-guarded webhooks that drop flag files",
)

app.command(server.app, name="server")
app.command(admin.app, name="admin")


def main() -> None:
    app()
