from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .models import RepoIdentity


@dataclass
class Config:
    slack_token: str
    codereview_channel: str
    slack_elevated_user_token: Optional[str] = None  # User token (xoxp-...) allowed to delete anyone's messages
    github_token: Optional[str] = None
    repository: Optional[str] = None  # owner/repo, as in GITHUB_REPOSITORY
    default_repo: str = "microsoft/vscode"  # PRs here don't get an "in <repo>" suffix
    editor_host: str = "insiders.vscode.dev"
    history_limit: int = 20
    request_timeout: int = 30  # seconds, per Slack/GitHub call
    log_level: str = "INFO"

    @property
    def repo_identity(self) -> Optional[RepoIdentity]:
        if not self.repository:
            return None
        return RepoIdentity.parse(self.repository)


def load_config(require_github: bool = True) -> Config:
    """Load configuration from environment variables / .env file."""

    load_dotenv()

    slack_token = os.getenv("SLACK_TOKEN")
    if not slack_token:
        raise ConfigError(
            "SLACK_TOKEN must be set in environment or .env file. "
            "This is the Bot Token (xoxb-...) of the app that posts review requests."
        )

    codereview_channel = os.getenv("CODEREVIEW_CHANNEL")
    if not codereview_channel:
        raise ConfigError("CODEREVIEW_CHANNEL must be set to the name of the review channel.")

    github_token = os.getenv("GITHUB_TOKEN") or None
    if require_github and not github_token:
        raise ConfigError("GITHUB_TOKEN must be set to post review requests.")

    def _int_env(name: str, default: int) -> int:
        val = os.getenv(name)
        if not val:
            return default
        try:
            return int(val)
        except ValueError:
            return default

    return Config(
        slack_token=slack_token,
        codereview_channel=codereview_channel.lstrip("#"),
        slack_elevated_user_token=os.getenv("SLACK_ELEVATED_USER_TOKEN") or None,
        github_token=github_token,
        repository=os.getenv("GITHUB_REPOSITORY") or None,
        default_repo=os.getenv("DEFAULT_REPO_FULL_NAME", "microsoft/vscode"),
        editor_host=os.getenv("EDITOR_HOST", "insiders.vscode.dev"),
        history_limit=_int_env("HISTORY_LIMIT", 20),
        request_timeout=_int_env("REQUEST_TIMEOUT", 30),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
