"""Workflow orchestrator: the entry point for running named workflows."""

import logging
import re
from typing import Any, Dict, Mapping, Optional

from taskbridge.core.adapters.base import TaskBoardAdapter, VersionControlAdapter
from taskbridge.core.errors import ErrorKind, UnknownWorkflowKind
from taskbridge.core.workflow.pipeline import WorkflowRunner
from taskbridge.core.workflow.step_base import CancellationToken, WorkflowContext
from taskbridge.core.workflow.types import WorkflowOutcome
from taskbridge.core.workflow.workflow_registry import (
    WorkflowRegistry,
    get_workflow_registry,
    kind_for_action,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert camelCase parameter names (``repoName``) to snake_case.

    Snake_case keys win when both spellings are supplied.
    """
    normalized: Dict[str, Any] = {}
    for key, value in params.items():
        snake = _CAMEL_BOUNDARY.sub("_", key).lower()
        if snake != key and snake in params:
            continue
        normalized[snake] = value
    return normalized


class WorkflowOrchestrator:
    """Runs workflows against a version-control and a task-board adapter.

    The orchestrator keeps no per-run state: each call to ``run`` builds its
    own context, step list and ledger, so concurrent runs do not interfere.
    """

    def __init__(
        self,
        vcs: VersionControlAdapter,
        board: TaskBoardAdapter,
        registry: Optional[WorkflowRegistry] = None,
        compensate_on_abort: bool = False,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            vcs: Version-control adapter
            board: Task-board adapter
            registry: Workflow registry (defaults to the global registry)
            compensate_on_abort: Undo completed steps in reverse order when a
                run aborts. Off by default: earlier side effects remain.
        """
        self.vcs = vcs
        self.board = board
        self.registry = registry or get_workflow_registry()
        self.compensate_on_abort = compensate_on_abort

    def run(
        self,
        kind: Any,
        params: Mapping[str, Any],
        cancel_token: Optional[CancellationToken] = None,
    ) -> WorkflowOutcome:
        """Run one workflow and return its outcome.

        Never raises; unknown kinds, missing parameters and step failures
        all come back as an aborted WorkflowOutcome.

        Args:
            kind: A WorkflowKind or its string value
            params: Workflow parameters (snake_case or camelCase keys)
            cancel_token: Optional token checked before every step

        Returns:
            WorkflowOutcome for this run
        """
        try:
            definition = self.registry.get(kind)
        except UnknownWorkflowKind as e:
            logger.error(str(e))
            return WorkflowOutcome.aborted(str(e), [], error_kind=e.kind)

        run_params = normalize_params(params)
        missing = [
            key for key in definition.required_params if run_params.get(key) in (None, "")
        ]
        if missing:
            message = (
                f"{definition.failure_prefix}: Missing required parameters: {', '.join(missing)}"
            )
            logger.error(message)
            return WorkflowOutcome.aborted(message, [], error_kind=ErrorKind.ADAPTER_ERROR)

        logger.info("Running workflow: %s", definition.kind.value)
        context = WorkflowContext(
            params=run_params,
            vcs=self.vcs,
            board=self.board,
            cancel_token=cancel_token,
        )
        runner = WorkflowRunner(
            definition.get_pipeline(), compensate_on_abort=self.compensate_on_abort
        )
        return runner.run(
            context,
            success_message=definition.success_message,
            failure_prefix=definition.failure_prefix,
        )


def dispatch_workflow_action(
    orchestrator: WorkflowOrchestrator,
    action: str,
    params: Mapping[str, Any],
    cancel_token: Optional[CancellationToken] = None,
) -> WorkflowOutcome:
    """Run the workflow named by a tool action tag.

    Raises:
        UnknownAction: If the action tag is not a workflow action; raised
            before any remote call.
    """
    kind = kind_for_action(action)
    return orchestrator.run(kind, params, cancel_token=cancel_token)
