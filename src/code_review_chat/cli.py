from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from pathlib import Path
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console
from slack_sdk.errors import SlackApiError

from .announce import publish_announcement
from .config import Config, load_config
from .errors import CodeReviewChatError, ConfigError
from .github_issue import GitHubIssue
from .logging_setup import configure_logging
from .models import PullRequestSummary, RepoIdentity
from .reconcile import reconcile_stale
from .slack_client import open_session

logger = logging.getLogger(__name__)


def load_event(path: Optional[str]) -> Dict[str, Any]:
    """Read a GitHub webhook payload, defaulting to ``$GITHUB_EVENT_PATH``."""

    event_path = path or os.getenv("GITHUB_EVENT_PATH")
    if not event_path:
        raise ConfigError("No event payload: pass --event or set GITHUB_EVENT_PATH")
    try:
        with open(Path(event_path), "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read event payload {event_path}: {e}") from e


def repo_from_event(event: Dict[str, Any], cfg: Config) -> RepoIdentity:
    full_name = (event.get("repository") or {}).get("full_name")
    if full_name:
        return RepoIdentity.parse(full_name)
    if cfg.repo_identity is None:
        raise ConfigError("Repository unknown: event has none and GITHUB_REPOSITORY is unset")
    return cfg.repo_identity


async def run_announce(cfg: Config, event: Dict[str, Any]) -> bool:
    pr = PullRequestSummary.from_event(event)
    repo = repo_from_event(event, cfg)
    session = await open_session(
        cfg.slack_token, cfg.slack_elevated_user_token, cfg.codereview_channel, cfg.request_timeout
    )
    issue = GitHubIssue.from_token(cfg.github_token or "", repo.full_name, pr.number, cfg.request_timeout)
    return await publish_announcement(
        pr,
        repo,
        issue,
        session,
        default_repo=cfg.default_repo,
        editor_host=cfg.editor_host,
    )


async def run_cleanup(cfg: Config, pr_url: str) -> int:
    session = await open_session(
        cfg.slack_token, cfg.slack_elevated_user_token, cfg.codereview_channel, cfg.request_timeout
    )
    result = await reconcile_stale(pr_url, session, history_limit=cfg.history_limit)
    return len(result.deleted)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-review-chat",
        description="Post pull requests to the code review channel and clean up after them",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    announce = sub.add_parser("announce", help="Announce a pull request that needs a reviewer")
    announce.add_argument("--event", help="Path to the GitHub event JSON (default: $GITHUB_EVENT_PATH)")

    cleanup = sub.add_parser("cleanup", help="Delete stale review messages for a pull request")
    cleanup.add_argument("--pr-url", help="Pull request URL to clean up after")
    cleanup.add_argument("--event", help="Path to the GitHub event JSON (default: $GITHUB_EVENT_PATH)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        cfg = load_config(require_github=args.command == "announce")
        configure_logging(cfg.log_level)

        if args.command == "announce":
            posted = asyncio.run(run_announce(cfg, load_event(args.event)))
            if posted:
                console.print(f"[green]Review request posted to #{cfg.codereview_channel}[/green]")
            else:
                console.print("[dim]Nothing to announce[/dim]")
        else:
            pr_url = args.pr_url or PullRequestSummary.from_event(load_event(args.event)).url
            deleted = asyncio.run(run_cleanup(cfg, pr_url))
            console.print(f"Deleted [bold]{deleted}[/bold] message(s) from #{cfg.codereview_channel}")
    except (CodeReviewChatError, SlackApiError, ValueError) as e:
        logger.error("%s", e)
        console.print(f"[red]{e}[/red]")
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
