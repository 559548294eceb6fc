"""Timeoff Server Module.

Provides the FastAPI application hosting the VacationBot.
"""

from timeoff.server.api import app, create_app
from timeoff.server.models import ConversationResponse, HealthResponse, TurnResponse

__all__ = [
    "app",
    "create_app",
    "ConversationResponse",
    "HealthResponse",
    "TurnResponse",
]
