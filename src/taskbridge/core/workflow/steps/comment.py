"""Comment steps on the task-board service."""

from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.step_base import WorkflowContext, WorkflowStep
from taskbridge.core.workflow.types import ServiceTag


def build_review_comment(pr_title: str, branch: str, repo_name: str, pr_url: str = "") -> str:
    lines = [
        "**Pull Request Created!**",
        "",
        f"**Title:** {pr_title}",
        f"**Branch:** {branch}",
        f"**Repository:** {repo_name}",
    ]
    if pr_url:
        lines.append(f"**Link:** {pr_url}")
    lines += ["", "Ready for code review!"]
    return "\n".join(lines)


def build_completion_comment(repo_name: str, branch: str) -> str:
    return (
        "**Task Completed!**\n\n"
        "This task has been successfully completed and the card is now closed.\n"
        f"Repository: {repo_name}\n"
        f"Branch: {branch}"
    )


class ReviewCommentStep(WorkflowStep):
    """Comment on the moved card with a link to the new PR."""

    action = "comment_added"

    @property
    def name(self) -> str:
        return "Adding review comment"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.TASK_BOARD

    @property
    def is_required(self) -> bool:
        return False

    def should_run(self, context: WorkflowContext) -> bool:
        # Only after the card was actually moved in this run
        return "card_moved" in context.data

    def run(self, context: WorkflowContext) -> OperationResult:
        pr_payload = context.data.get("pr_created")
        pr_url = pr_payload.get("url", "") if pr_payload else ""
        text = build_review_comment(
            context.require("pr_title"),
            context.require("branch_name"),
            context.require("repo_name"),
            pr_url,
        )
        return context.board.add_comment(context.require("card_id"), text)


class CompletionCommentStep(WorkflowStep):
    """Note task completion on the closed card."""

    action = "completion_comment_added"

    @property
    def name(self) -> str:
        return "Adding completion comment"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.TASK_BOARD

    def run(self, context: WorkflowContext) -> OperationResult:
        text = build_completion_comment(
            context.require("repo_name"), context.require("branch_name")
        )
        return context.board.add_comment(context.require("card_id"), text)
