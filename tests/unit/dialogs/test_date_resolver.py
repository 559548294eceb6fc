"""Tests for DateResolverDialog."""

import pytest

from timeoff.core.constants import DialogKind, DialogTurnStatus
from timeoff.core.types import DateRange, SingleDate
from timeoff.dialogs.date_resolver import RETRY_PROMPT
from timeoff.dialogs.vacation import START_DATE_PROMPT


class TestDateResolverDialog:
    """Tests for the prompt/validate loop."""

    @pytest.mark.asyncio
    async def test_prompts_on_begin(self, harness):
        """Test that beginning the resolver sends its prompt and waits."""
        result = await harness.context().begin_dialog(DialogKind.START_DATE_RESOLVER)

        assert result.status == DialogTurnStatus.WAITING
        assert harness.sent == [START_DATE_PROMPT]

    @pytest.mark.asyncio
    async def test_ambiguous_reply_then_definite_date(self, harness):
        """Test that 'next Friday' is retried and a full date ends the resolver."""
        # Arrange
        statuses = []

        # Act
        statuses.append(
            (await harness.context().begin_dialog(DialogKind.START_DATE_RESOLVER)).status
        )
        statuses.append((await harness.say("next Friday")).status)
        final = await harness.say("2024-07-01")

        # Assert: suspended exactly twice, then done
        assert statuses == [DialogTurnStatus.WAITING, DialogTurnStatus.WAITING]
        assert final.status == DialogTurnStatus.COMPLETE
        assert final.result == SingleDate(value="2024-07-01")
        assert harness.sent == [START_DATE_PROMPT, RETRY_PROMPT]
        assert harness.state.frames == []

    @pytest.mark.asyncio
    async def test_reply_without_date_is_retried(self, harness):
        """Test that a reply with no date at all keeps the resolver waiting."""
        await harness.context().begin_dialog(DialogKind.START_DATE_RESOLVER)

        result = await harness.say("whenever")

        assert result.status == DialogTurnStatus.WAITING
        assert harness.sent[-1] == RETRY_PROMPT
        assert harness.state.frames[-1].step_index == 0

    @pytest.mark.asyncio
    async def test_missing_year_is_retried(self, harness):
        """Test that a month and day without a year is not accepted."""
        await harness.context().begin_dialog(DialogKind.START_DATE_RESOLVER)

        result = await harness.say("July 1st")

        assert result.status == DialogTurnStatus.WAITING
        assert harness.sent[-1] == RETRY_PROMPT

    @pytest.mark.asyncio
    async def test_range_reply(self, harness):
        """Test that a reply naming two dates resolves to a DateRange."""
        await harness.context().begin_dialog(DialogKind.START_DATE_RESOLVER)

        result = await harness.say("2024-07-01 to 2024-07-05")

        assert result.result == DateRange(start="2024-07-01", end="2024-07-05")
