"""Pipeline runner for workflow execution."""

import logging
from typing import List, Optional, Tuple

from taskbridge.core.errors import ErrorKind, TaskbridgeError
from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.step_base import WorkflowContext, WorkflowStep
from taskbridge.core.workflow.types import RunState, StepResult, WorkflowOutcome
from taskbridge.core.workflow.workflow_io import log_step_end, log_step_skipped, log_step_start

logger = logging.getLogger(__name__)


class WorkflowRunner:
    """Executes workflow steps strictly in sequence.

    The first step that raises aborts the run. Steps that already completed
    are left in place unless ``compensate_on_abort`` is set, in which case
    their ``compensate`` hooks run in reverse order.
    """

    def __init__(self, steps: List[WorkflowStep], compensate_on_abort: bool = False) -> None:
        """Initialize the runner with a list of steps.

        Args:
            steps: Ordered list of workflow steps to execute
            compensate_on_abort: Whether to undo completed steps after an abort
        """
        self._steps = steps
        self._compensate_on_abort = compensate_on_abort
        self.state = RunState.PENDING

    def run(
        self,
        context: WorkflowContext,
        success_message: str = "Workflow completed successfully!",
        failure_prefix: str = "Workflow failed",
    ) -> WorkflowOutcome:
        """Execute all scheduled steps and aggregate the outcome.

        Never raises: any failure becomes an aborted WorkflowOutcome carrying
        the ledger accumulated so far.

        Args:
            context: Per-run context
            success_message: Message for a completed run
            failure_prefix: Prefix for the failure message of an aborted run

        Returns:
            WorkflowOutcome for this run
        """
        self.state = RunState.RUNNING
        ledger: List[StepResult] = []
        completed: List[Tuple[WorkflowStep, OperationResult]] = []
        current: Optional[WorkflowStep] = None

        try:
            for step in self._steps:
                if not step.should_run(context):
                    log_step_skipped(step.name)
                    continue

                if context.cancel_token is not None:
                    context.cancel_token.raise_if_cancelled(step.name)

                current = step
                log_step_start(step.name)
                payload = step.run(context)
                log_step_end(step.name, True)

                ledger.append(
                    StepResult(
                        step_name=step.name,
                        action=step.action,
                        service=step.service,
                        payload=payload,
                    )
                )
                context.data[step.action] = payload
                completed.append((step, payload))
                current = None
        except TaskbridgeError as e:
            return self._abort(context, ledger, completed, current, failure_prefix, e, e.kind)
        except Exception as e:
            logger.exception("Unexpected error during workflow step")
            return self._abort(
                context, ledger, completed, current, failure_prefix, e, ErrorKind.ADAPTER_ERROR
            )

        self.state = RunState.COMPLETED
        logger.info("\n=== Workflow completed successfully ===")
        return WorkflowOutcome.completed(success_message, ledger)

    def _abort(
        self,
        context: WorkflowContext,
        ledger: List[StepResult],
        completed: List[Tuple[WorkflowStep, OperationResult]],
        current: Optional[WorkflowStep],
        failure_prefix: str,
        error: Exception,
        kind: ErrorKind,
    ) -> WorkflowOutcome:
        self.state = RunState.ABORTED
        failed_step = current.name if current else None
        if current is not None:
            log_step_end(current.name, False, str(error))
        logger.error("%s: %s, aborting workflow", failure_prefix, error)

        if self._compensate_on_abort and completed:
            self._compensate(context, completed)

        return WorkflowOutcome.aborted(
            f"{failure_prefix}: {error}",
            ledger,
            error_kind=kind,
            failed_step=failed_step,
        )

    def _compensate(
        self,
        context: WorkflowContext,
        completed: List[Tuple[WorkflowStep, OperationResult]],
    ) -> None:
        for step, payload in reversed(completed):
            try:
                logger.info("Compensating step '%s'", step.name)
                step.compensate(context, payload)
            except Exception as e:
                logger.warning("Compensation for step '%s' failed: %s", step.name, e)


def get_task_creation_pipeline() -> List[WorkflowStep]:
    """Create branch, then create the tracking card."""
    from taskbridge.core.workflow.steps.branch import CreateBranchStep
    from taskbridge.core.workflow.steps.card import CreateCardStep

    return [CreateBranchStep(), CreateCardStep()]


def get_review_transition_pipeline() -> List[WorkflowStep]:
    """Create the PR, then optionally move the card and comment on it."""
    from taskbridge.core.workflow.steps.card import MoveCardStep
    from taskbridge.core.workflow.steps.comment import ReviewCommentStep
    from taskbridge.core.workflow.steps.pull_request import CreatePullRequestStep

    return [CreatePullRequestStep(), MoveCardStep(), ReviewCommentStep()]


def get_completion_pipeline() -> List[WorkflowStep]:
    """Close the card, comment on it, and optionally delete the branch."""
    from taskbridge.core.workflow.steps.branch import DeleteBranchStep
    from taskbridge.core.workflow.steps.card import CloseCardStep
    from taskbridge.core.workflow.steps.comment import CompletionCommentStep

    return [CloseCardStep(), CompletionCommentStep(), DeleteBranchStep()]
