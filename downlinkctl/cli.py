"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import logging

import typer

from downlinkctl.core.config_store import ConfigStore, FileBackend
from downlinkctl.core.errors import DownlinkctlError
from downlinkctl.core.model import MAX_F_PORT, MIN_F_PORT, InsertMode, Priority, Status, StatusVariant
from downlinkctl.core.service import DownlinkService

app = typer.Typer(help="Compose and submit LoRaWAN downlinks to The Things Stack")
config_app = typer.Typer(help="Show and edit the saved connection settings")
app.add_typer(config_app, name="config")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_service() -> DownlinkService:
    return DownlinkService(store=ConfigStore(FileBackend()))


def _echo_status(status: Status) -> None:
    if status.variant is StatusVariant.ERROR:
        typer.echo(status.message, err=True)
        raise typer.Exit(code=1)
    if status.variant is StatusVariant.WARNING:
        typer.echo(status.message, err=True)
        return
    typer.echo(status.message)


@config_app.command("show")
def show_config() -> None:
    """Print the saved settings. The API key is never shown."""
    try:
        service = _build_service()
        settings = service.settings
        typer.echo(f"TTN server: {settings.server}")
        typer.echo(f"Application name: {settings.app_name or '<unset>'}")
        typer.echo(f"End device name: {settings.end_device_name or '<unset>'}")
        typer.echo(f"API key: {'configured' if service.is_configured else 'not configured'}")
    except DownlinkctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@config_app.command("save")
def save_config(
    server: str | None = typer.Option(None, "--server", help="URL of the TTN cluster"),
    app_name: str | None = typer.Option(None, "--app", help="Application name"),
    device: str | None = typer.Option(None, "--device", help="End device name"),
) -> None:
    """Save server, application and end device names."""
    try:
        service = _build_service()
        status = service.save_settings(server=server, app_name=app_name, end_device_name=device)
    except DownlinkctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    _echo_status(status)


@config_app.command("set-key")
def set_key(
    api_key: str = typer.Option(
        ...,
        "--api-key",
        prompt="API key",
        hide_input=True,
        help="Application API key; prompted for when omitted",
    ),
) -> None:
    """Store the API key."""
    try:
        service = _build_service()
        service.set_api_key(api_key)
    except DownlinkctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo("API key: configured" if service.is_configured else "API key: not configured")


@config_app.command("reset-key")
def reset_key() -> None:
    """Forget the stored API key."""
    try:
        service = _build_service()
        service.reset_api_key()
    except DownlinkctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo("API key: not configured")


@app.command("send")
def send(
    payload: str = typer.Argument(..., help="Payload bytes as hex, e.g. 0A1B"),
    fport: int = typer.Option(1, "--fport", min=MIN_F_PORT, max=MAX_F_PORT, help="FPort"),
    priority: Priority = typer.Option(Priority.NORMAL, "--priority", case_sensitive=False),
    insert_mode: InsertMode = typer.Option(InsertMode.REPLACE, "--insert-mode", case_sensitive=False),
    confirmed: bool = typer.Option(False, "--confirmed/--unconfirmed", help="Request a confirmed downlink"),
) -> None:
    """Send one downlink using the saved settings."""
    try:
        service = _build_service()
        status = asyncio.run(
            service.submit(
                payload,
                f_port=fport,
                priority=priority,
                insert_mode=insert_mode,
                confirmed=confirmed,
            )
        )
    except DownlinkctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    _echo_status(status)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
