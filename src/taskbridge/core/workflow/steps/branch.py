"""Branch steps on the version-control service."""

from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.step_base import WorkflowContext, WorkflowStep
from taskbridge.core.workflow.types import ServiceTag


class CreateBranchStep(WorkflowStep):
    """Create the task branch; the adapter enforces the branch naming policy."""

    action = "branch_created"

    @property
    def name(self) -> str:
        return "Creating branch"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.VERSION_CONTROL

    def run(self, context: WorkflowContext) -> OperationResult:
        return context.vcs.create_branch(
            context.require("repo_name"),
            context.require("branch_name"),
            description=context.param("task_title", ""),
        )

    def compensate(self, context: WorkflowContext, payload: OperationResult) -> None:
        branch = payload.get("branch") or context.require("branch_name")
        context.vcs.delete_branch(context.require("repo_name"), branch)


class DeleteBranchStep(WorkflowStep):
    """Delete the task branch once the task is complete, when requested."""

    action = "branch_deleted"

    @property
    def name(self) -> str:
        return "Deleting branch"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.VERSION_CONTROL

    @property
    def is_required(self) -> bool:
        return False

    def should_run(self, context: WorkflowContext) -> bool:
        value = context.param("delete_branch", False)
        if isinstance(value, str):
            # Values from `-p delete_branch=...` arrive as strings
            return value.strip().lower() in ("1", "true", "yes")
        return bool(value)

    def run(self, context: WorkflowContext) -> OperationResult:
        return context.vcs.delete_branch(
            context.require("repo_name"), context.require("branch_name")
        )
