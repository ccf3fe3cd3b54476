from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .db import ConnectError, MyadmError, connect
from .logging import setup_logging
from .settings import load_settings
from .tui import AppState, Navigator, Router

app = typer.Typer(
    add_completion=False,
    help="myadm: browse and edit a MySQL server from the terminal",
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"myadm {__version__}", highlight=False)
        raise typer.Exit()


@app.command()
def browse(
    host: Optional[str] = typer.Option(None, "-h", "--host", help="Server host (MYADM_DB_HOST)"),
    user: Optional[str] = typer.Option(None, "-u", "--user", help="User name (MYADM_DB_USER)"),
    password: Optional[str] = typer.Option(None, "-p", "--password", help="Password (MYADM_DB_PASS)"),
    port: Optional[int] = typer.Option(None, "-P", "--port", help="Server port (MYADM_DB_PORT)"),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    [bold]myadm[/bold]: drill down from databases to tables to records.

    [bold]Keys:[/bold]
      j/k, ↓/↑      move       Enter/Space  open
      q             back       I            reload
      e             edit       s            show schema
      Q             quit
    """
    s = load_settings(
        MYADM_DB_HOST=host,
        MYADM_DB_USER=user,
        MYADM_DB_PASS=password,
        MYADM_DB_PORT=port,
    )
    setup_logging(s)

    try:
        executor = connect(s)
    except ConnectError as exc:
        err_console.print(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    router = Router(
        console=console,
        settings=s,
        state=AppState(),
        nav=Navigator(),
        executor=executor,
    )
    try:
        router.start()
    except MyadmError as exc:
        executor.close()
        err_console.print(f"[red]✗ Cannot list databases:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    try:
        router.run()
    finally:
        router.close()
        console.clear()


def main():
    app()
