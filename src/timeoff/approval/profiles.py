"""Profile directories: resolve a channel user id to a stable identity."""

import logging

import httpx

from timeoff.core.errors import ProfileLookupError

logger = logging.getLogger(__name__)

SLACK_USERS_INFO_URL = "https://slack.com/api/users.info"


class SlackProfileDirectory:
    """Looks up a Slack user's email through ``users.info``."""

    def __init__(
        self,
        token: str | None,
        timeout: float = 10.0,
        url: str = SLACK_USERS_INFO_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.timeout = timeout
        self.url = url
        self._transport = transport

    async def lookup_identity(self, user_id: str) -> str:
        if not self.token:
            raise ProfileLookupError("No Slack OAuth token configured for profile lookups")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    self.url,
                    params={"user": user_id},
                    headers={"Authorization": f"Bearer {self.token}"},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProfileLookupError(f"users.info failed for {user_id}: {e}") from e

        if not data.get("ok"):
            raise ProfileLookupError(f"users.info rejected {user_id}: {data.get('error')}")

        profile = (data.get("user") or {}).get("profile") or {}
        email = profile.get("email")
        if not email:
            raise ProfileLookupError(f"Slack profile of {user_id} has no email")

        logger.debug(f"Resolved Slack user {user_id} to {email}")
        return str(email)


class StaticProfileDirectory:
    """Identities from configuration; for channels without a profile API."""

    def __init__(self, identities: dict[str, str] | None = None) -> None:
        self.identities = dict(identities or {})

    async def lookup_identity(self, user_id: str) -> str:
        try:
            return self.identities[user_id]
        except KeyError:
            raise ProfileLookupError(f"No configured identity for {user_id}") from None
