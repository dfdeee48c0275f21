from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
from typing import Callable, List, Optional, Protocol, TypeVar

from github import Auth, Github, GithubException

from .errors import ProviderQueryError
from .models import IssueInfo, Milestone

logger = logging.getLogger(__name__)

T = TypeVar("T")

WRITE_PERMISSIONS = {"admin", "maintain", "write"}


class IssueProvider(Protocol):
    """What the publisher needs to know about (and do to) one pull request."""

    async def get_issue(self) -> IssueInfo: ...

    async def has_write_access(self, user: str) -> bool: ...

    async def add_assignee(self, user: str) -> None: ...

    async def get_current_repo_milestone(self) -> Optional[Milestone]: ...

    async def set_milestone(self, milestone: Milestone) -> None: ...

    async def list_reviews(self) -> List[str]: ...

    async def list_review_requests(self) -> List[str]: ...


def _to_milestone(raw) -> Optional[Milestone]:
    if raw is None:
        return None
    return Milestone(number=raw.number, title=raw.title, due_on=raw.due_on)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class GitHubIssue:
    """PyGithub-backed provider for one pull request.

    PyGithub is blocking, so each call runs in a worker thread and the
    publisher can still await several of them at once.
    """

    def __init__(self, github: Github, repo_full_name: str, number: int) -> None:
        self.github = github
        self.repo_full_name = repo_full_name
        self.number = number
        self._repo = github.get_repo(repo_full_name, lazy=True)

    @classmethod
    def from_token(cls, token: str, repo_full_name: str, number: int, timeout: int = 30) -> "GitHubIssue":
        return cls(Github(auth=Auth.Token(token), timeout=timeout), repo_full_name, number)

    async def _call(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except GithubException as e:
            detail = e.data.get("message") if isinstance(e.data, dict) else None
            raise ProviderQueryError(operation, e.status, detail) from e

    async def get_issue(self) -> IssueInfo:
        def fetch() -> IssueInfo:
            issue = self._repo.get_issue(self.number)
            return IssueInfo(
                author=issue.user.login,
                assignee=issue.assignee.login if issue.assignee else None,
                milestone=_to_milestone(issue.milestone),
            )

        return await self._call("get issue", fetch)

    async def has_write_access(self, user: str) -> bool:
        permission = await self._call(
            "get collaborator permission",
            lambda: self._repo.get_collaborator_permission(user),
        )
        return permission in WRITE_PERMISSIONS

    async def add_assignee(self, user: str) -> None:
        await self._call(
            "add assignee",
            lambda: self._repo.get_issue(self.number).add_to_assignees(user),
        )

    async def get_current_repo_milestone(self) -> Optional[Milestone]:
        """Return the open milestone due soonest, ignoring overdue ones."""

        def fetch() -> Optional[Milestone]:
            now = datetime.now(tz=timezone.utc)
            upcoming = [
                m
                for m in self._repo.get_milestones(state="open", sort="due_on", direction="asc")
                if m.due_on is not None and _as_utc(m.due_on) > now
            ]
            if not upcoming:
                return None
            upcoming.sort(key=lambda m: _as_utc(m.due_on))
            return _to_milestone(upcoming[0])

        return await self._call("list milestones", fetch)

    async def set_milestone(self, milestone: Milestone) -> None:
        def apply() -> None:
            issue = self._repo.get_issue(self.number)
            issue.edit(milestone=self._repo.get_milestone(milestone.number))

        await self._call("set milestone", apply)

    async def list_reviews(self) -> List[str]:
        def fetch() -> List[str]:
            pull = self._repo.get_pull(self.number)
            return [r.user.login for r in pull.get_reviews() if r.user is not None]

        return await self._call("list reviews", fetch)

    async def list_review_requests(self) -> List[str]:
        def fetch() -> List[str]:
            users, _teams = self._repo.get_pull(self.number).get_review_requests()
            return [u.login for u in users]

        return await self._call("list review requests", fetch)
