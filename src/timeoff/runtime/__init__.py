"""Runtime: turn pipeline, checkpointing and the bot entry point."""

from timeoff.runtime.bot import TurnOutcome, VacationBot
from timeoff.runtime.checkpointer import create_checkpointer
from timeoff.runtime.pipeline import build_turn_pipeline

__all__ = ["TurnOutcome", "VacationBot", "build_turn_pipeline", "create_checkpointer"]
