"""Remove review-request messages that no longer need attention.

Nothing is stored between runs: the messages belonging to a pull request are
found again each time by looking for its URL in recent channel history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List

from slack_sdk.errors import SlackApiError

from .errors import DeleteAuthorizationError, HistoryFetchError, ThreadFetchError
from .models import ChatMessage, MessageSubtype
from .slack_client import SLACK_CALL_ERRORS, ChatSession

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20
APPROVED_REACTION = "white_check_mark"


@dataclass
class ReconcileResult:
    candidates: List[ChatMessage] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    aborted: bool = False


def is_deletion_candidate(message: ChatMessage, pr_url: str, elevated: bool) -> bool:
    # Join notices, tombstones and other system messages are always noise.
    if message.subtype is not MessageSubtype.NONE:
        return True
    if pr_url and pr_url in message.text:
        return True
    # Only a user token can remove messages a human marked as done.
    return elevated and message.has_reaction(APPROVED_REACTION)


async def fetch_history(session: ChatSession, limit: int = HISTORY_LIMIT) -> List[ChatMessage]:
    try:
        resp = await session.client.conversations_history(channel=session.channel_id, limit=limit)
    except SLACK_CALL_ERRORS as e:
        raise HistoryFetchError(session.channel_id, str(e)) from e

    raw_messages = resp.get("messages")
    if not resp.get("ok") or raw_messages is None:
        raise HistoryFetchError(session.channel_id, resp.get("error"))
    return [ChatMessage.from_api(m) for m in raw_messages]


async def fetch_replies(session: ChatSession, root: ChatMessage) -> List[ChatMessage]:
    """Return the replies under ``root``, or nothing if they can't be listed."""
    try:
        resp = await session.client.conversations_replies(channel=session.channel_id, ts=root.ts)
    except SLACK_CALL_ERRORS as e:
        logger.warning("%s", ThreadFetchError(root.ts, str(e)))
        return []

    raw_messages = resp.get("messages")
    if not resp.get("ok") or raw_messages is None:
        logger.warning("%s", ThreadFetchError(root.ts, resp.get("error")))
        return []
    replies: List[ChatMessage] = []
    # The first item is the thread root itself.
    for raw in raw_messages[1:]:
        try:
            replies.append(ChatMessage.from_api(raw))
        except ValueError as e:
            logger.debug("Skipping malformed reply in %s: %s", root.ts, e)
    return replies


async def collect_candidates(
    session: ChatSession, history: List[ChatMessage], pr_url: str
) -> List[ChatMessage]:
    roots = [m for m in history if is_deletion_candidate(m, pr_url, session.has_elevated)]

    candidates = list(roots)
    seen = {m.ts for m in candidates}
    for root in roots:
        if root.reply_count <= 0:
            continue
        for reply in await fetch_replies(session, root):
            if reply.ts not in seen:
                seen.add(reply.ts)
                candidates.append(reply)
    return candidates


async def delete_messages(session: ChatSession, messages: List[ChatMessage]) -> ReconcileResult:
    result = ReconcileResult(candidates=list(messages))
    if session.elevated_client is not None:
        client, as_user = session.elevated_client, True
    else:
        # The bot can only remove what it posted itself.
        client, as_user = session.client, False

    for message in messages:
        # Already gone; it was only collected to reach its replies.
        if message.subtype is MessageSubtype.TOMBSTONE:
            continue
        if message.raw_subtype:
            logger.debug("Deleting %s system message %s", message.raw_subtype, message.ts)
        try:
            await client.chat_delete(channel=session.channel_id, ts=message.ts, as_user=as_user)
        except SLACK_CALL_ERRORS as e:
            detail = e.response.get("error") if isinstance(e, SlackApiError) else str(e)
            logger.warning(
                "%s; probably posted by some human, stopping this pass",
                DeleteAuthorizationError(message.ts, detail),
            )
            result.aborted = True
            break
        result.deleted.append(message.ts)
    return result


async def reconcile_stale(
    pr_url: str, session: ChatSession, *, history_limit: int = HISTORY_LIMIT
) -> ReconcileResult:
    """Delete ``pr_url``'s announcement, its thread, and other stale messages.

    Only the last ``history_limit`` messages are looked at. Raises
    HistoryFetchError if history can't be read; delete failures end the pass
    quietly.
    """

    history = await fetch_history(session, history_limit)
    candidates = await collect_candidates(session, history, pr_url)
    if not candidates:
        logger.info("No message found for %s, exiting", pr_url)
        return ReconcileResult()

    result = await delete_messages(session, candidates)
    logger.info(
        "Deleted %d of %d candidate message(s)%s",
        len(result.deleted),
        len(candidates),
        " (stopped early)" if result.aborted else "",
    )
    return result
