"""Pull request step on the version-control service."""

from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.step_base import WorkflowContext, WorkflowStep
from taskbridge.core.workflow.types import ServiceTag


class CreatePullRequestStep(WorkflowStep):
    """Open a PR from the task branch into the repository's default branch."""

    action = "pr_created"

    @property
    def name(self) -> str:
        return "Creating pull request"

    @property
    def service(self) -> ServiceTag:
        return ServiceTag.VERSION_CONTROL

    def run(self, context: WorkflowContext) -> OperationResult:
        return context.vcs.create_pull_request(
            context.require("repo_name"),
            context.require("branch_name"),
            context.require("pr_title"),
        )
