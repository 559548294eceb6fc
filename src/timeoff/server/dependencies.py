"""FastAPI dependencies for server endpoints."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from timeoff.runtime.bot import VacationBot


def get_bot(request: Request) -> VacationBot:
    """Dependency to get the initialized VacationBot.

    Raises:
        HTTPException: 503 if the bot is not initialized
    """
    bot = getattr(request.app.state, "bot", None)

    if bot is None:
        raise HTTPException(
            status_code=503,
            detail={
                "error": "Service temporarily unavailable",
                "message": "Server is starting up. Please try again in a few seconds.",
            },
        )
    return bot


BotDep = Annotated[VacationBot, Depends(get_bot)]
