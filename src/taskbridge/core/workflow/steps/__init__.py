"""Workflow step implementations.

Each step wraps one adapter call and records a ledger action when it
succeeds.
"""

from taskbridge.core.workflow.steps.branch import CreateBranchStep, DeleteBranchStep
from taskbridge.core.workflow.steps.card import CloseCardStep, CreateCardStep, MoveCardStep
from taskbridge.core.workflow.steps.comment import CompletionCommentStep, ReviewCommentStep
from taskbridge.core.workflow.steps.pull_request import CreatePullRequestStep

__all__ = [
    "CreateBranchStep",
    "DeleteBranchStep",
    "CreateCardStep",
    "MoveCardStep",
    "CloseCardStep",
    "CreatePullRequestStep",
    "ReviewCommentStep",
    "CompletionCommentStep",
]
