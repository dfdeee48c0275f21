from __future__ import annotations

from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from code_review_chat.models import ChannelMembership, IssueInfo, Milestone, PullRequestSummary
from code_review_chat.slack_client import ChatSession

PR_URL = "https://github.com/microsoft/vscode/pull/4242"


class FakeIssue:
    """In-memory IssueProvider; every method is an AsyncMock so calls can be asserted."""

    def __init__(
        self,
        author: str = "alice",
        assignee: Optional[str] = None,
        milestone: Optional[Milestone] = None,
        write_access: bool = True,
        current_milestone: Optional[Milestone] = None,
        reviewers: Optional[List[str]] = None,
        requested: Optional[List[str]] = None,
    ) -> None:
        self.get_issue = AsyncMock(
            return_value=IssueInfo(author=author, assignee=assignee, milestone=milestone)
        )
        self.has_write_access = AsyncMock(return_value=write_access)
        self.add_assignee = AsyncMock(return_value=None)
        self.get_current_repo_milestone = AsyncMock(return_value=current_milestone)
        self.set_milestone = AsyncMock(return_value=None)
        self.list_reviews = AsyncMock(return_value=reviewers or [])
        self.list_review_requests = AsyncMock(return_value=requested or [])

    def all_calls(self) -> int:
        return sum(
            m.await_count
            for m in (
                self.get_issue,
                self.has_write_access,
                self.add_assignee,
                self.get_current_repo_milestone,
                self.set_milestone,
                self.list_reviews,
                self.list_review_requests,
            )
        )


def make_slack_client() -> MagicMock:
    client = MagicMock()
    client.conversations_list = AsyncMock()
    client.conversations_history = AsyncMock()
    client.conversations_replies = AsyncMock()
    client.chat_postMessage = AsyncMock(return_value={"ok": True, "ts": "1700000000.000100"})
    client.chat_delete = AsyncMock(return_value={"ok": True})
    return client


@pytest.fixture
def pr() -> PullRequestSummary:
    return PullRequestSummary(
        number=4242,
        owner="alice",
        title="`fix: crash` on startup",
        url=PR_URL,
        draft=False,
        additions=5,
        deletions=0,
        changed_files=1,
    )


@pytest.fixture
def session() -> ChatSession:
    return ChatSession(
        channel=ChannelMembership(id="C123", name="codereview", is_member=True),
        client=make_slack_client(),
    )


@pytest.fixture
def elevated_session() -> ChatSession:
    return ChatSession(
        channel=ChannelMembership(id="C123", name="codereview", is_member=True),
        client=make_slack_client(),
        elevated_client=make_slack_client(),
    )


@pytest.fixture
def make_issue():
    return FakeIssue


@pytest.fixture
def make_client():
    return make_slack_client


@pytest.fixture
def pr_url() -> str:
    return PR_URL
