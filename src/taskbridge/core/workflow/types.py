"""Result types for workflow orchestration.

A run produces exactly one ``WorkflowOutcome``. Its ``steps`` ledger holds a
``StepResult`` for every step that executed and succeeded, in execution
order; failed and skipped steps leave no entry.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taskbridge.core.errors import ErrorKind
from taskbridge.core.models import OperationResult


class ServiceTag(str, Enum):
    """External service a step talks to."""

    VERSION_CONTROL = "version_control"
    TASK_BOARD = "task_board"


class RunState(str, Enum):
    """Lifecycle of a single workflow run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class StepResult(BaseModel):
    """Ledger entry for one successfully executed step.

    Attributes:
        step_name: Name of the step that produced the entry
        action: Ledger action tag (e.g. "branch_created")
        service: Which external service the step called
        payload: The adapter's success payload
    """

    model_config = ConfigDict(frozen=True)

    step_name: str
    action: str
    service: ServiceTag
    payload: OperationResult


class WorkflowOutcome(BaseModel):
    """Aggregated result of one workflow run.

    Attributes:
        success: True iff every scheduled step completed
        message: Summary line, or the failure text on abort
        steps: Ledger of completed steps in execution order
        state: Terminal run state (completed or aborted)
        error_kind: Kind of the failure that aborted the run
        failed_step: Name of the step that raised, if any
    """

    success: bool
    message: str
    steps: List[StepResult] = Field(default_factory=list)
    state: RunState = RunState.COMPLETED
    error_kind: Optional[ErrorKind] = None
    failed_step: Optional[str] = None

    @classmethod
    def completed(cls, message: str, steps: List[StepResult]) -> "WorkflowOutcome":
        return cls(success=True, message=message, steps=list(steps), state=RunState.COMPLETED)

    @classmethod
    def aborted(
        cls,
        message: str,
        steps: List[StepResult],
        error_kind: ErrorKind,
        failed_step: Optional[str] = None,
    ) -> "WorkflowOutcome":
        return cls(
            success=False,
            message=message,
            steps=list(steps),
            state=RunState.ABORTED,
            error_kind=error_kind,
            failed_step=failed_step,
        )
