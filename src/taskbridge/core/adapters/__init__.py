"""Adapters for the external version-control and task-board services."""

from taskbridge.core.adapters.base import (
    HttpAdapter,
    TaskBoardAdapter,
    VersionControlAdapter,
    parse_action,
)
from taskbridge.core.adapters.github import GitHubAction, GitHubAdapter
from taskbridge.core.adapters.trello import TrelloAction, TrelloAdapter

__all__ = [
    "HttpAdapter",
    "VersionControlAdapter",
    "TaskBoardAdapter",
    "parse_action",
    "GitHubAdapter",
    "GitHubAction",
    "TrelloAdapter",
    "TrelloAction",
]
