from __future__ import annotations

from typing import Optional


class CodeReviewChatError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(CodeReviewChatError):
    pass


class ChannelNotFound(CodeReviewChatError):
    def __init__(self, channel_name: str) -> None:
        super().__init__(f"Slack channel not found: {channel_name}")
        self.channel_name = channel_name


class HistoryFetchError(CodeReviewChatError):
    def __init__(self, channel_id: str, detail: Optional[str] = None) -> None:
        message = f"Error getting channel history for {channel_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.channel_id = channel_id


class ThreadFetchError(CodeReviewChatError):
    """Replies of one thread could not be listed. Logged, never raised."""

    def __init__(self, ts: str, detail: Optional[str] = None) -> None:
        super().__init__(f"Error getting replies for {ts}: {detail or 'unknown'}")
        self.ts = ts


class DeleteAuthorizationError(CodeReviewChatError):
    """A delete was refused, usually because a human posted the message."""

    def __init__(self, ts: str, detail: Optional[str] = None) -> None:
        super().__init__(f"Error deleting message {ts}: {detail or 'unknown'}")
        self.ts = ts


class PaginationPageError(CodeReviewChatError):
    def __init__(self, cursor: Optional[str], detail: Optional[str] = None) -> None:
        super().__init__(f"Error listing channels (cursor={cursor!r}): {detail or 'unknown'}")
        self.cursor = cursor


class ProviderQueryError(CodeReviewChatError):
    """A GitHub call failed. Fatal for the announcement run."""

    def __init__(self, operation: str, status: Optional[int] = None, detail: Optional[str] = None) -> None:
        message = f"GitHub {operation} failed"
        if status is not None:
            message = f"{message} ({status})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation
        self.status = status
