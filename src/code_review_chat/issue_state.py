"""Issue bookkeeping that runs alongside the review announcement.

Neither task depends on the other or on the announcement, so the publisher
gathers all of them at once.
"""

from __future__ import annotations

import logging
from typing import Awaitable, List

from .github_issue import IssueProvider
from .models import IssueInfo

logger = logging.getLogger(__name__)


async def assign_author(issue: IssueProvider, info: IssueInfo) -> None:
    if info.assignee:
        logger.debug("Already assigned to %s", info.assignee)
        return
    logger.info("Assigning author %s", info.author)
    await issue.add_assignee(info.author)


async def apply_current_milestone(issue: IssueProvider, info: IssueInfo) -> None:
    current = await issue.get_current_repo_milestone()
    if info.milestone or current is None:
        return
    logger.info("Setting milestone %s", current.title)
    await issue.set_milestone(current)


def issue_state_tasks(issue: IssueProvider, info: IssueInfo) -> List[Awaitable[None]]:
    tasks: List[Awaitable[None]] = []
    if not info.assignee:
        tasks.append(assign_author(issue, info))
    tasks.append(apply_current_milestone(issue, info))
    return tasks
