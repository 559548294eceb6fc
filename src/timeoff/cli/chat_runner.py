"""Interactive chat runner for the timeoff CLI."""

import uuid
from contextlib import AsyncExitStack
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Prompt

from timeoff.config.loader import ConfigLoader
from timeoff.core.constants import ChannelId
from timeoff.core.errors import ConfigError
from timeoff.core.message_sink import MessageSink, OutboundContent
from timeoff.core.types import InboundTurn
from timeoff.runtime.bot import VacationBot
from timeoff.runtime.checkpointer import create_checkpointer

BANNER_ART = r"""
  _   _                 __  __
 | |_(_)_ __ ___   ___ / _|/ _|
 | __| | '_ ` _ \ / _ \ |_| |_
 | |_| | | | | | |  __/  _|  _|
  \__|_|_| |_| |_|\___|_| |_|
"""


class ConsoleMessageSink(MessageSink):
    """Sink that prints to rich console."""

    def __init__(self, console: Console):
        self.console = console

    async def send(self, channel_id: str, content: OutboundContent) -> None:
        text = content if isinstance(content, str) else content.get("text", str(content))
        self.console.print(f"[bold blue]Bot > [/]{text}\n")


@dataclass
class ChatConfig:
    """Configuration for chat runner."""

    config_path: Path | None = None
    conversation_id: str | None = None
    user_id: str = "cli-user"
    debug: bool = False


class ChatRunner:
    """Interactive chat session on the emulator channel."""

    def __init__(self, config: ChatConfig):
        self.config = config
        self.console = Console()
        self.bot: VacationBot | None = None
        self.conversation_id = config.conversation_id or f"cli_{uuid.uuid4().hex[:6]}"
        self._stack = AsyncExitStack()
        self._running = False

    async def setup(self) -> None:
        """Load configuration, open persistence and start the bot.

        Raises:
            ConfigError: If config is invalid
        """
        load_dotenv()

        try:
            timeoff_config = ConfigLoader.load(self.config.config_path)
        except ConfigError as e:
            self.console.print(f"[red]Invalid config: {e}[/]")
            raise

        checkpointer = await self._stack.enter_async_context(
            create_checkpointer(timeoff_config.persistence)
        )
        self.bot = await self._stack.enter_async_context(
            VacationBot(timeoff_config, checkpointer, sink=ConsoleMessageSink(self.console))
        )

    async def start(self) -> None:
        """Start the interactive session."""
        if not self.bot:
            await self.setup()

        self.console.print(BANNER_ART, style="bold blue")
        self.console.print(f"Conversation: [green]{self.conversation_id}[/]")
        self.console.print("Type 'help' for help, 'cancel' to start over, 'exit' to quit.\n")

        self._running = True
        while self._running:
            try:
                user_input = Prompt.ask("[bold green]You[/]")

                if self._is_exit_command(user_input):
                    self.console.print("\n[yellow]Goodbye![/]")
                    break

                if not user_input.strip():
                    continue

                # Responses are printed by ConsoleMessageSink
                if self.bot is not None:
                    await self.bot.process_turn(
                        InboundTurn(
                            conversation_id=self.conversation_id,
                            channel_id=ChannelId.EMULATOR.value,
                            text=user_input,
                            from_id=self.config.user_id,
                        )
                    )

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Goodbye![/]")
                break
            except Exception as e:
                if self.config.debug:
                    self.console.print_exception()
                else:
                    self.console.print(f"[red]Error: {e}[/]")

    def _is_exit_command(self, user_input: str) -> bool:
        """Check if input is an exit command. 'quit' is kept for the cancel interrupt."""
        return user_input.strip().lower() in ("exit", "/exit", "/quit")

    async def cleanup(self) -> None:
        """Clean up resources."""
        self._running = False
        await self._stack.aclose()
        self.bot = None

    async def __aenter__(self) -> "ChatRunner":
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.cleanup()
