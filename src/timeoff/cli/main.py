"""Main CLI entry point for timeoff"""

import asyncio
import os
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv

from timeoff.__version__ import __version__
from timeoff.cli.chat_runner import ChatConfig, ChatRunner
from timeoff.config.loader import CONFIG_PATH_ENV, ConfigLoader
from timeoff.core.errors import ConfigError
from timeoff.observability.logging import setup_logging

app = typer.Typer(
    name="timeoff",
    help="timeoff - vacation request bot",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit"""
    if value:
        typer.echo(f"timeoff version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """timeoff - vacation request bot"""
    pass


def _load_config(config: Path | None):
    load_dotenv()
    try:
        return ConfigLoader.load(config)
    except ConfigError as e:
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def chat(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to timeoff configuration YAML file"
    ),
    conversation: str | None = typer.Option(
        None, "--conversation", help="Conversation id to resume"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks"),
) -> None:
    """Chat with the bot in the terminal (emulator channel)."""
    timeoff_config = _load_config(config)
    # The console belongs to the chat; logs go to the file only
    setup_logging("DEBUG" if debug else timeoff_config.log_level, console=False)

    async def run() -> None:
        async with ChatRunner(
            ChatConfig(config_path=config, conversation_id=conversation, debug=debug)
        ) as runner:
            await runner.start()

    asyncio.run(run())


@app.command()
def server(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to timeoff configuration YAML file"
    ),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind the server to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind the server to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload (development only)"),
) -> None:
    """Start the timeoff API server."""
    if port < 1 or port > 65535:
        typer.echo(f"Error: Port must be between 1 and 65535, got {port}", err=True)
        raise typer.Exit(1)

    timeoff_config = _load_config(config)
    if config is not None:
        # The app's lifespan loads the same file
        os.environ[CONFIG_PATH_ENV] = str(config.absolute())

    setup_logging(timeoff_config.log_level)

    typer.echo("\nStarting timeoff server...")
    typer.echo(f"   Host: {host}")
    typer.echo(f"   Port: {port}")
    typer.echo(f"   Messages: http://{host}:{port}/api/messages")
    typer.echo(f"   Slack actions: http://{host}:{port}/slack/actions\n")

    uvicorn.run(
        "timeoff.server.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


def cli() -> None:
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    cli()
