"""Forwards finalized requests to the approval service and acknowledges the origin message.

Both outbound chains are best effort. By the time they run the user has
already confirmed, so failures are logged and never surface in the dialog.
"""

import asyncio
import logging
from typing import Any

import httpx

from timeoff.core.errors import ApprovalSubmissionError, DownstreamCallError, ProfileLookupError
from timeoff.core.interfaces import IProfileDirectory
from timeoff.core.types import ApprovalRequest

logger = logging.getLogger(__name__)


class ApprovalNotifier:
    """Profile lookup + approval submission, and the acknowledgement post."""

    def __init__(
        self,
        directory: IProfileDirectory,
        approval_endpoint: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.directory = directory
        self.approval_endpoint = approval_endpoint
        self.timeout = timeout
        self._transport = transport

    async def finalize(
        self,
        user_id: str | None,
        start_date: str,
        end_date: str,
        *,
        summary: str,
        ack_address: str | None = None,
    ) -> ApprovalRequest | None:
        """Run both chains concurrently.

        Returns:
            The ApprovalRequest built for the responding user, or None when no
            identity could be resolved (nothing is submitted in that case).
        """
        calls = [self._resolve_and_submit(user_id, start_date, end_date)]
        if ack_address:
            calls.append(self._acknowledge_quietly(ack_address, summary))

        request, *_ = await asyncio.gather(*calls)
        return request

    async def resolve_requester(self, user_id: str | None) -> str | None:
        if not user_id:
            logger.warning("No responding user id; cannot attribute the approval request")
            return None
        try:
            return await self.directory.lookup_identity(user_id)
        except ProfileLookupError as e:
            logger.warning(f"Profile lookup failed: {e}")
            return None

    async def submit(self, request: ApprovalRequest) -> None:
        """POST the request to the approval endpoint.

        Raises:
            ApprovalSubmissionError: On transport errors or a non-2xx status.
        """
        if not self.approval_endpoint:
            raise ApprovalSubmissionError("No approval endpoint configured")
        await self._post(self.approval_endpoint, request.to_payload(), ApprovalSubmissionError)
        logger.info(
            f"Submitted approval request for {request.requester_identity} "
            f"({request.start_date} to {request.end_date})"
        )

    async def acknowledge(self, ack_address: str, summary: str) -> None:
        """Replace the origin message with ``summary``."""
        await self._post(
            ack_address, {"text": summary, "replace_original": True}, DownstreamCallError
        )
        logger.info("Acknowledged origin message")

    async def _resolve_and_submit(
        self, user_id: str | None, start_date: str, end_date: str
    ) -> ApprovalRequest | None:
        identity = await self.resolve_requester(user_id)
        if identity is None:
            return None

        request = ApprovalRequest(
            requester_identity=identity, start_date=start_date, end_date=end_date
        )
        try:
            await self.submit(request)
        except ApprovalSubmissionError as e:
            logger.error(f"Approval submission failed for {identity}: {e}")
        return request

    async def _acknowledge_quietly(self, ack_address: str, summary: str) -> None:
        try:
            await self.acknowledge(ack_address, summary)
        except DownstreamCallError as e:
            logger.error(f"Acknowledgement post failed: {e}")

    async def _post(
        self, url: str, payload: dict[str, Any], error_cls: type[DownstreamCallError]
    ) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise error_cls(f"POST {url} failed: {e}") from e
