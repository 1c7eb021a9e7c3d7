"""Card steps on the task-board service."""

from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.step_base import WorkflowContext, WorkflowStep
from taskbridge.core.workflow.types import ServiceTag


def build_card_description(description: str, branch: str, repo_name: str) -> str:
    """Append the branch and repository links to a card description."""
    return f"{description}\n\n**GitHub Branch:** {branch}\n**Repository:** {repo_name}"


class CreateCardStep(WorkflowStep):
    """Create the tracking card, linking the branch created earlier in the run."""

    action = "card_created"

    @property
    def name(self) -> str:
        return "Creating card"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.TASK_BOARD

    def run(self, context: WorkflowContext) -> OperationResult:
        branch_payload = context.data.get("branch_created")
        branch = (
            branch_payload.get("branch") if branch_payload else None
        ) or context.require("branch_name")
        description = build_card_description(
            context.param("task_description", ""), branch, context.require("repo_name")
        )
        return context.board.create_card(
            context.require("trello_list_id"),
            context.require("task_title"),
            description,
            due=context.param("due_date"),
        )

    def compensate(self, context: WorkflowContext, payload: OperationResult) -> None:
        card_id = payload.get("id")
        if card_id:
            context.board.update_card(card_id, closed=True)


class MoveCardStep(WorkflowStep):
    """Move the card to the review list when both ids are supplied."""

    action = "card_moved"

    @property
    def name(self) -> str:
        return "Moving card to review"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.TASK_BOARD

    @property
    def is_required(self) -> bool:
        return False

    def should_run(self, context: WorkflowContext) -> bool:
        return context.has_params("card_id", "review_list_id")

    def run(self, context: WorkflowContext) -> OperationResult:
        return context.board.move_card(
            context.require("card_id"), context.require("review_list_id")
        )


class CloseCardStep(WorkflowStep):
    """Mark the card as closed."""

    action = "card_completed"

    @property
    def name(self) -> str:
        return "Closing card"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.TASK_BOARD

    def run(self, context: WorkflowContext) -> OperationResult:
        return context.board.update_card(context.require("card_id"), closed=True)
