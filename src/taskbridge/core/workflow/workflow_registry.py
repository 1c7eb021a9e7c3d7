"""Workflow registry for resolving workflow kinds to their pipelines."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from taskbridge.core.errors import UnknownAction, UnknownWorkflowKind
from taskbridge.core.workflow.step_base import WorkflowStep


class WorkflowKind(str, Enum):
    """The closed set of workflows Taskbridge can run."""

    TASK_CREATION = "task-creation"
    REVIEW_TRANSITION = "review-transition"
    COMPLETION = "completion"

    @classmethod
    def parse(cls, value: Any) -> "WorkflowKind":
        """Resolve a kind from a member or its string value.

        Raises:
            UnknownWorkflowKind: If the value names no workflow
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownWorkflowKind(str(value), [k.value for k in cls]) from None


# Tool action tags accepted by dispatch_workflow_action
WORKFLOW_ACTIONS: Dict[str, WorkflowKind] = {
    "create_task_with_card": WorkflowKind.TASK_CREATION,
    "create_pr_and_update_card": WorkflowKind.REVIEW_TRANSITION,
    "complete_task": WorkflowKind.COMPLETION,
}


def kind_for_action(action: str) -> WorkflowKind:
    """Map a workflow action tag to its WorkflowKind.

    Raises:
        UnknownAction: If the tag is not a known workflow action
    """
    kind = WORKFLOW_ACTIONS.get(action)
    if kind is None:
        raise UnknownAction(action, WORKFLOW_ACTIONS.keys(), scope="workflow")
    return kind


@dataclass(frozen=True)
class WorkflowDefinition:
    """Definition of a named workflow pipeline.

    Attributes:
        kind: The workflow kind this definition implements
        pipeline: Callable returning a fresh list of steps for one run
        required_params: Parameters that must be present before any remote call
        success_message: Outcome message for a completed run
        failure_prefix: Prefix of the outcome message for an aborted run
        description: Human-readable description of the workflow
    """

    kind: WorkflowKind
    pipeline: Callable[[], List[WorkflowStep]]
    required_params: Tuple[str, ...]
    success_message: str
    failure_prefix: str
    description: str = ""

    def get_pipeline(self) -> List[WorkflowStep]:
        return self.pipeline()


class WorkflowRegistry:
    """Registry for workflow definitions, keyed by WorkflowKind."""

    def __init__(self) -> None:
        self._registry: Dict[WorkflowKind, WorkflowDefinition] = {}

    def register(self, definition: WorkflowDefinition) -> None:
        """Register a workflow definition.

        Args:
            definition: The workflow definition to register
        """
        self._registry[definition.kind] = definition

    def get(self, kind: Any) -> WorkflowDefinition:
        """Resolve a workflow kind to its definition.

        Args:
            kind: A WorkflowKind or its string value

        Returns:
            The registered WorkflowDefinition

        Raises:
            UnknownWorkflowKind: If the kind is unknown or not registered
        """
        workflow_kind = WorkflowKind.parse(kind)
        definition = self._registry.get(workflow_kind)
        if definition is None:
            raise UnknownWorkflowKind(workflow_kind.value, self.list_kinds())
        return definition

    def list_kinds(self) -> List[str]:
        """List all registered workflow kinds.

        Returns:
            Sorted list of registered kind values
        """
        return sorted(kind.value for kind in self._registry)

    def is_registered(self, kind: Any) -> bool:
        try:
            return WorkflowKind.parse(kind) in self._registry
        except UnknownWorkflowKind:
            return False


# ---------------------------------------------------------------------------
# Singleton management
# ---------------------------------------------------------------------------

_REGISTRY_INSTANCE: Optional[WorkflowRegistry] = None


def _register_default_workflows(registry: WorkflowRegistry) -> None:
    """Populate *registry* with the built-in workflows.

    Uses local imports to avoid circular dependencies with pipeline.py.
    """
    from taskbridge.core.workflow.pipeline import (
        get_completion_pipeline,
        get_review_transition_pipeline,
        get_task_creation_pipeline,
    )

    registry.register(
        WorkflowDefinition(
            kind=WorkflowKind.TASK_CREATION,
            pipeline=get_task_creation_pipeline,
            required_params=(
                "repo_name",
                "branch_name",
                "task_title",
                "task_description",
                "trello_list_id",
            ),
            success_message="Task workflow completed successfully!",
            failure_prefix="Workflow failed",
            description="Create a branch and a tracking card",
        )
    )
    registry.register(
        WorkflowDefinition(
            kind=WorkflowKind.REVIEW_TRANSITION,
            pipeline=get_review_transition_pipeline,
            required_params=("repo_name", "branch_name", "pr_title"),
            success_message="PR workflow completed successfully!",
            failure_prefix="PR workflow failed",
            description="Open a pull request and move the card to review",
        )
    )
    registry.register(
        WorkflowDefinition(
            kind=WorkflowKind.COMPLETION,
            pipeline=get_completion_pipeline,
            required_params=("card_id", "repo_name", "branch_name"),
            success_message="Task completion workflow finished!",
            failure_prefix="Completion workflow failed",
            description="Close the card and note completion",
        )
    )


def get_workflow_registry() -> WorkflowRegistry:
    """Return the global WorkflowRegistry singleton, creating it on first call.

    Returns:
        The shared WorkflowRegistry instance with default workflows registered
    """
    global _REGISTRY_INSTANCE
    if _REGISTRY_INSTANCE is None:
        _REGISTRY_INSTANCE = WorkflowRegistry()
        _register_default_workflows(_REGISTRY_INSTANCE)
    return _REGISTRY_INSTANCE


def reset_workflow_registry() -> None:
    """Reset the global registry singleton (for test isolation)."""
    global _REGISTRY_INSTANCE
    _REGISTRY_INSTANCE = None
