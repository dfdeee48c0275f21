from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import logging
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestSummary:
    number: int
    owner: str
    title: str
    url: str
    draft: bool
    additions: int
    deletions: int
    changed_files: int
    body: str = ""

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "PullRequestSummary":
        """Build from a GitHub ``pull_request`` webhook payload."""
        pr = event.get("pull_request") or {}
        if "number" not in pr or "html_url" not in pr:
            raise ValueError("Event payload has no pull_request")
        return cls(
            number=int(pr["number"]),
            owner=(pr.get("user") or {}).get("login", ""),
            title=pr.get("title") or "",
            url=pr["html_url"],
            draft=bool(pr.get("draft", False)),
            additions=int(pr.get("additions") or 0),
            deletions=int(pr.get("deletions") or 0),
            changed_files=int(pr.get("changed_files") or 0),
            body=pr.get("body") or "",
        )


@dataclass(frozen=True)
class RepoIdentity:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, full_name: str) -> "RepoIdentity":
        owner, sep, repo = full_name.strip().partition("/")
        if not sep or not owner or not repo:
            raise ValueError(f"Expected owner/repo, got {full_name!r}")
        return cls(owner=owner, repo=repo)


@dataclass(frozen=True)
class ChannelMembership:
    id: str
    name: str
    is_member: bool

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> Optional["ChannelMembership"]:
        """Parse one ``conversations.list`` entry; ``None`` if it is unusable."""
        channel_id = raw.get("id")
        name = raw.get("name")
        if not isinstance(channel_id, str) or not isinstance(name, str):
            logger.debug("Skipping malformed channel entry: %r", raw)
            return None
        return cls(id=channel_id, name=name, is_member=raw.get("is_member") is True)


class MessageSubtype(Enum):
    NONE = "none"
    # Deleted server-side but kept in history because it still has replies.
    TOMBSTONE = "tombstone"
    CHANNEL_JOIN = "channel_join"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "MessageSubtype":
        if not raw:
            return cls.NONE
        if raw == cls.TOMBSTONE.value:
            return cls.TOMBSTONE
        if raw == cls.CHANNEL_JOIN.value:
            return cls.CHANNEL_JOIN
        return cls.OTHER


@dataclass(frozen=True)
class Reaction:
    name: str
    count: int


@dataclass(frozen=True)
class ChatMessage:
    ts: str
    text: str
    subtype: MessageSubtype
    reply_count: int = 0
    reactions: Tuple[Reaction, ...] = ()
    raw_subtype: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "ChatMessage":
        ts = raw.get("ts")
        if not isinstance(ts, str) or not ts:
            raise ValueError(f"Slack message without ts: {raw!r}")

        reactions = []
        for r in raw.get("reactions") or []:
            name = r.get("name")
            if not name:
                continue
            try:
                count = int(r.get("count", 0))
            except (TypeError, ValueError):
                count = 0
            reactions.append(Reaction(name=name, count=count))

        try:
            reply_count = int(raw.get("reply_count") or 0)
        except (TypeError, ValueError):
            reply_count = 0

        raw_subtype = raw.get("subtype") or None
        return cls(
            ts=ts,
            text=raw.get("text") or "",
            subtype=MessageSubtype.parse(raw_subtype),
            reply_count=reply_count,
            reactions=tuple(reactions),
            raw_subtype=raw_subtype,
        )

    def has_reaction(self, name: str) -> bool:
        return any(r.name == name and r.count >= 1 for r in self.reactions)


@dataclass(frozen=True)
class Milestone:
    number: int
    title: str
    due_on: Optional[datetime] = None


@dataclass(frozen=True)
class IssueInfo:
    author: str
    assignee: Optional[str] = None
    milestone: Optional[Milestone] = None


@dataclass(frozen=True)
class ReviewState:
    has_non_author_review: bool
    has_pending_review_request: bool

    @property
    def claimed(self) -> bool:
        return self.has_non_author_review or self.has_pending_review_request
