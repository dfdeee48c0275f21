"""Post a review request for a pull request into the code review channel.

Whether to post is re-derived on every run from GitHub: a PR that already
has a review from someone other than its author, or any pending reviewer
request, is considered claimed and gets no announcement.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Any, Dict, List

from .github_issue import IssueProvider
from .issue_state import issue_state_tasks
from .models import PullRequestSummary, RepoIdentity, ReviewState
from .slack_client import ChatSession

logger = logging.getLogger(__name__)

DEFAULT_REPO = "microsoft/vscode"
DEFAULT_EDITOR_HOST = "insiders.vscode.dev"


@dataclass(frozen=True)
class Announcement:
    text: str
    blocks: List[Dict[str, Any]]


def diff_summary(additions: int, deletions: int, changed_files: int) -> str:
    files = f"{changed_files} file" + ("" if changed_files == 1 else "s")
    return f"+{additions:,} -{deletions:,}, {files}"


def editor_url(pr_url: str, editor_host: str = DEFAULT_EDITOR_HOST) -> str:
    # https://github.com/o/r/pull/1 -> https://<editor_host>/github.com/o/r/pull/1
    return pr_url.replace("https://", f"https://{editor_host}/", 1)


def compose_announcement(
    pr: PullRequestSummary,
    repo_full_name: str,
    *,
    default_repo: str = DEFAULT_REPO,
    editor_host: str = DEFAULT_EDITOR_HOST,
) -> Announcement:
    # Backticks would close the inline code span around the diff summary.
    clean_title = pr.title.replace("`", "")
    diff = diff_summary(pr.additions, pr.deletions, pr.changed_files)
    repo_message = "" if repo_full_name == default_repo else f" in {repo_full_name}"

    blocks: List[Dict[str, Any]] = [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"{clean_title} by {pr.owner}{repo_message}: `{diff}`",
            },
        },
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "emoji": True, "text": "Open in vscode.dev"},
                    "style": "primary",
                    "action_id": "vscodedev",
                    "url": editor_url(pr.url, editor_host),
                },
                {
                    "type": "button",
                    "text": {"type": "plain_text", "emoji": True, "text": "Open on github.com"},
                    "action_id": "github",
                    "url": pr.url,
                },
            ],
        },
    ]
    return Announcement(text=f"New Pull Request from {pr.owner}", blocks=blocks)


async def fetch_review_state(issue: IssueProvider, author: str) -> ReviewState:
    reviewers, requested = await asyncio.gather(
        issue.list_reviews(),
        issue.list_review_requests(),
    )
    return ReviewState(
        # The author commenting on their own PR doesn't count as a review.
        has_non_author_review=any(login != author for login in reviewers),
        has_pending_review_request=bool(requested),
    )


async def post_announcement(session: ChatSession, announcement: Announcement) -> None:
    await session.client.chat_postMessage(
        channel=session.channel_id,
        text=announcement.text,
        blocks=announcement.blocks,
        link_names=True,
    )


async def _announce_if_unclaimed(
    pr: PullRequestSummary,
    repo: RepoIdentity,
    issue: IssueProvider,
    session: ChatSession,
    author: str,
    default_repo: str,
    editor_host: str,
) -> bool:
    state = await fetch_review_state(issue, author)
    if state.claimed:
        logger.info("PR #%s had existing reviews or review requests, not announcing", pr.number)
        return False

    announcement = compose_announcement(
        pr, repo.full_name, default_repo=default_repo, editor_host=editor_host
    )
    logger.info(announcement.text)
    await post_announcement(session, announcement)
    return True


async def publish_announcement(
    pr: PullRequestSummary,
    repo: RepoIdentity,
    issue: IssueProvider,
    session: ChatSession,
    *,
    default_repo: str = DEFAULT_REPO,
    editor_host: str = DEFAULT_EDITOR_HOST,
) -> bool:
    """Announce ``pr`` in the session's channel if nobody has picked it up yet.

    Also assigns the author and sets the current milestone when those are
    missing. Those updates run concurrently with the announcement and are not
    rolled back if posting fails. Returns True if a message was posted.
    """

    if pr.draft:
        logger.info("PR #%s is draft, ignoring", pr.number)
        return False

    info = await issue.get_issue()
    if not await issue.has_write_access(info.author):
        logger.info("PR #%s author %s not team member, ignoring", pr.number, info.author)
        return False

    # Every task runs to completion before the first failure is re-raised.
    results = await asyncio.gather(
        *issue_state_tasks(issue, info),
        _announce_if_unclaimed(pr, repo, issue, session, info.author, default_repo, editor_host),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return bool(results[-1])
