"""Timeoff FastAPI Application.

Hosts the VacationBot: generic inbound turns, Slack interactive-message
callbacks and read access to conversation state.
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from urllib.parse import parse_qs

from dotenv import load_dotenv
from fastapi import FastAPI, Request

from timeoff.__version__ import __version__
from timeoff.channels.base import CorrelationKind
from timeoff.channels.correlator import has_pending_confirmation
from timeoff.config import ConfigLoader, TimeoffConfig
from timeoff.core.constants import ChannelId
from timeoff.core.errors import ConfigError, TimeoffError
from timeoff.core.types import InboundTurn
from timeoff.runtime.bot import TurnOutcome, VacationBot
from timeoff.runtime.checkpointer import create_checkpointer
from timeoff.server.dependencies import BotDep
from timeoff.server.errors import global_exception_handler, timeoff_exception_handler
from timeoff.server.models import ConversationResponse, HealthResponse, TurnResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - initialize on startup, cleanup on shutdown."""
    load_dotenv()

    config: TimeoffConfig | None = getattr(app.state, "config", None)
    if config is None:
        try:
            config = ConfigLoader.load()
        except ConfigError as e:
            logger.error(f"Failed to load config: {e}")
            yield
            return

    async with create_checkpointer(config.persistence) as checkpointer:
        async with VacationBot(config, checkpointer) as bot:
            app.state.bot = bot
            app.state.config = config
            logger.info("VacationBot initialized and ready.")
            yield
            logger.info("VacationBot cleanup...")
            app.state.bot = None


app = FastAPI(
    title="Timeoff",
    description="Vacation request bot built on a stack-based dialog engine",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(TimeoffError, timeoff_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)


def _turn_response(conversation_id: str, outcome: TurnOutcome) -> TurnResponse:
    return TurnResponse(
        conversation_id=conversation_id,
        correlation=outcome.correlation,
        status=outcome.status,
        responses=outcome.responses,
        reason=outcome.reason,
        result=outcome.result,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness check."""
    bot = getattr(request.app.state, "bot", None)
    return HealthResponse(
        status="healthy" if bot else "starting",
        version=__version__,
        timestamp=datetime.now().isoformat(),
    )


@app.post("/api/messages", response_model=TurnResponse)
async def process_message(turn: InboundTurn, bot: BotDep) -> TurnResponse:
    """Process an inbound turn and return everything the bot sent in reply."""
    outcome = await bot.process_turn(turn)
    return _turn_response(turn.conversation_id, outcome)


@app.post("/slack/actions", response_model=TurnResponse)
async def slack_actions(request: Request, bot: BotDep) -> TurnResponse:
    """Slack interactive-message callback (form-encoded ``payload``).

    The click becomes an action turn on the conversation of the Slack channel
    the message was posted in. Unusable payloads are acknowledged with 200 so
    Slack does not retry them.
    """
    body = (await request.body()).decode("utf-8")
    raw_payload = parse_qs(body).get("payload", [""])[0]
    try:
        payload: Any = json.loads(raw_payload)
    except json.JSONDecodeError:
        payload = None

    if not isinstance(payload, dict):
        logger.warning("Slack action request without a JSON payload")
        return TurnResponse(
            conversation_id="", correlation=CorrelationKind.FAILURE, reason="missing payload"
        )

    channel = payload.get("channel")
    conversation_id = channel.get("id") if isinstance(channel, dict) else None
    if not isinstance(conversation_id, str) or not conversation_id:
        logger.warning("Slack action payload has no channel.id; cannot route it")
        return TurnResponse(
            conversation_id="", correlation=CorrelationKind.FAILURE, reason="missing channel.id"
        )

    turn = InboundTurn(
        conversation_id=conversation_id,
        channel_id=ChannelId.SLACK.value,
        channel_payload=payload,
    )
    outcome = await bot.process_turn(turn)
    return _turn_response(conversation_id, outcome)


@app.get("/conversations/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(conversation_id: str, bot: BotDep) -> ConversationResponse:
    """Current dialog stack of a conversation."""
    state = await bot.get_conversation(conversation_id)
    active = state.frames[-1].dialog_id.value if state.frames else None
    return ConversationResponse(
        conversation_id=conversation_id,
        active_dialog=active,
        pending_confirmation=has_pending_confirmation(state),
        frames=state.frames,
    )


def create_app(config: TimeoffConfig | None = None) -> FastAPI:
    """Factory function."""
    if config:
        app.state.config = config
    return app
