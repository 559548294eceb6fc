"""Fixtures for end-to-end bot tests through the LangGraph pipeline."""

import pytest
import pytest_asyncio
from langgraph.checkpoint.memory import MemorySaver

from timeoff.config.models import ChannelsConfig, TimeoffConfig
from timeoff.core.message_sink import BufferedMessageSink
from timeoff.runtime.bot import VacationBot


@pytest.fixture
def config():
    return TimeoffConfig(channels=ChannelsConfig(default_user_id="U-DEFAULT"))


@pytest.fixture
def sink():
    return BufferedMessageSink()


@pytest_asyncio.fixture
async def bot(config, sink, recognizer, notifier):
    async with VacationBot(
        config, MemorySaver(), sink=sink, recognizer=recognizer, notifier=notifier
    ) as started:
        yield started
