"""Checkpointer factory.

Supports two backends:
- memory: In-memory (development/testing)
- sqlite: SQLite file-based (local persistence)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import MemorySaver

from timeoff.config.models import PersistenceConfig
from timeoff.core.errors import ConfigError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_checkpointer(config: PersistenceConfig) -> AsyncIterator[BaseCheckpointSaver]:
    """Open the checkpointer described by ``config`` for the duration of the block.

    Raises:
        ConfigError: If the backend is unknown or its package is not installed.
    """
    if config.backend == "memory":
        logger.debug("Creating in-memory checkpointer")
        yield MemorySaver()
        return

    if config.backend == "sqlite":
        try:
            from langgraph.checkpoint.sqlite.aio import AsyncSqliteSaver
        except ImportError as e:
            raise ConfigError(
                "SQLite checkpointer requires 'langgraph-checkpoint-sqlite'. "
                "Install with: pip install 'timeoff[sqlite]'"
            ) from e

        path = Path(config.path)
        path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Creating SQLite checkpointer at {path}")
        async with AsyncSqliteSaver.from_conn_string(str(path)) as saver:
            yield saver
        return

    raise ConfigError(f"Unknown checkpointer type: {config.backend}")
