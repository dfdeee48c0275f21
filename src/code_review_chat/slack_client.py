from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import AsyncIterator, List, Optional

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from .errors import ChannelNotFound, PaginationPageError
from .models import ChannelMembership

logger = logging.getLogger(__name__)

CHANNEL_TYPES = "public_channel,private_channel"

# Transport and API errors a single Slack call can fail with.
SLACK_CALL_ERRORS = (SlackApiError, aiohttp.ClientError, asyncio.TimeoutError)


async def iter_membership_pages(
    client: AsyncWebClient, page_size: int = 100
) -> AsyncIterator[List[ChannelMembership]]:
    """Yield parsed ``conversations.list`` pages until the cursor runs out.

    A failing page is logged and treated as the last one, so callers keep
    whatever earlier pages returned.
    """

    cursor: Optional[str] = None
    while True:
        try:
            resp = await client.conversations_list(
                types=CHANNEL_TYPES,
                limit=page_size,
                cursor=cursor,
            )
        except SLACK_CALL_ERRORS as e:
            detail = e.response.get("error") if isinstance(e, SlackApiError) else str(e)
            logger.warning("%s", PaginationPageError(cursor, detail))
            return

        page: List[ChannelMembership] = []
        for raw in resp.get("channels") or []:
            channel = ChannelMembership.from_api(raw)
            if channel is not None:
                page.append(channel)
        yield page

        cursor = (resp.get("response_metadata") or {}).get("next_cursor") or None
        if not cursor:
            return


async def list_member_channels(client: AsyncWebClient) -> List[ChannelMembership]:
    """Return every public/private channel the token's user belongs to."""

    channels: List[ChannelMembership] = []
    async for page in iter_membership_pages(client):
        channels.extend(page)
    return [c for c in channels if c.is_member]


async def resolve_channel(client: AsyncWebClient, channel_name: str) -> ChannelMembership:
    if not channel_name:
        raise ChannelNotFound(channel_name)

    memberships = await list_member_channels(client)
    for channel in memberships:
        if channel.name == channel_name:
            logger.debug("Resolved #%s to %s", channel_name, channel.id)
            return channel
    raise ChannelNotFound(channel_name)


@dataclass(frozen=True)
class ChatSession:
    """A resolved channel plus the clients allowed to act in it."""

    channel: ChannelMembership
    client: AsyncWebClient
    elevated_client: Optional[AsyncWebClient] = None

    @property
    def channel_id(self) -> str:
        return self.channel.id

    @property
    def has_elevated(self) -> bool:
        return self.elevated_client is not None


async def open_session(
    token: str,
    elevated_token: Optional[str],
    channel_name: str,
    timeout: int = 30,
) -> ChatSession:
    client = AsyncWebClient(token=token, timeout=timeout)
    elevated_client = AsyncWebClient(token=elevated_token, timeout=timeout) if elevated_token else None
    channel = await resolve_channel(client, channel_name)
    return ChatSession(channel=channel, client=client, elevated_client=elevated_client)
