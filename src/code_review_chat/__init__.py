"""Announce pull requests in a Slack review channel and clean up after them."""

from .announce import Announcement, compose_announcement, diff_summary, publish_announcement
from .config import Config, load_config
from .errors import (
    ChannelNotFound,
    CodeReviewChatError,
    ConfigError,
    DeleteAuthorizationError,
    HistoryFetchError,
    PaginationPageError,
    ProviderQueryError,
    ThreadFetchError,
)
from .github_issue import GitHubIssue, IssueProvider
from .models import (
    ChannelMembership,
    ChatMessage,
    IssueInfo,
    MessageSubtype,
    Milestone,
    PullRequestSummary,
    RepoIdentity,
    ReviewState,
)
from .reconcile import ReconcileResult, reconcile_stale
from .slack_client import ChatSession, open_session, resolve_channel

__all__ = [
    "Announcement",
    "compose_announcement",
    "diff_summary",
    "publish_announcement",
    "Config",
    "load_config",
    "ChannelNotFound",
    "CodeReviewChatError",
    "ConfigError",
    "DeleteAuthorizationError",
    "HistoryFetchError",
    "PaginationPageError",
    "ProviderQueryError",
    "ThreadFetchError",
    "GitHubIssue",
    "IssueProvider",
    "ChannelMembership",
    "ChatMessage",
    "IssueInfo",
    "MessageSubtype",
    "Milestone",
    "PullRequestSummary",
    "RepoIdentity",
    "ReviewState",
    "ReconcileResult",
    "reconcile_stale",
    "ChatSession",
    "open_session",
    "resolve_channel",
]
