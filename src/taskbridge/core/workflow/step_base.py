"""Abstract base class for workflow steps and context management."""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from taskbridge.core.adapters.base import TaskBoardAdapter, VersionControlAdapter
from taskbridge.core.errors import AdapterError, WorkflowCancelled
from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.types import ServiceTag


class CancellationToken:
    """Thread-safe flag used to abandon an in-flight run between steps."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, step_name: Optional[str] = None) -> None:
        if self._event.is_set():
            raise WorkflowCancelled(step_name)


@dataclass
class WorkflowContext:
    """Per-run state passed between workflow steps.

    Attributes:
        params: Caller-supplied workflow parameters
        vcs: Version-control adapter
        board: Task-board adapter
        data: Payloads of completed steps, keyed by ledger action
        cancel_token: Optional token checked before every step
    """

    params: Dict[str, Any]
    vcs: VersionControlAdapter
    board: TaskBoardAdapter
    data: Dict[str, OperationResult] = field(default_factory=dict)
    cancel_token: Optional[CancellationToken] = None

    def param(self, key: str, default: Any = None) -> Any:
        value = self.params.get(key)
        return default if value is None or value == "" else value

    def require(self, key: str) -> Any:
        """Return a required parameter, raising AdapterError if it is missing."""
        value = self.param(key)
        if value is None:
            raise AdapterError(f"Missing required parameter: {key}")
        return value

    def has_params(self, *keys: str) -> bool:
        return all(self.param(key) is not None for key in keys)


class WorkflowStep(ABC):
    """Abstract base class for workflow steps.

    Each step performs one adapter call. Required steps are always
    scheduled; optional steps run only when ``should_run`` returns True.
    """

    #: Ledger action tag recorded for a successful run
    action: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging/identification."""
        ...

    @property
    @abstractmethod
    def service(self) -> ServiceTag:
        """External service this step calls."""
        ...

    @property
    def is_required(self) -> bool:
        """Whether the step is always scheduled.

        Returns:
            True for required steps (default), False for steps gated on
            optional parameters or earlier results.
        """
        return True

    def should_run(self, context: WorkflowContext) -> bool:
        """Gate for optional steps; required steps always run."""
        return True

    @abstractmethod
    def run(self, context: WorkflowContext) -> OperationResult:
        """Execute the step logic.

        Args:
            context: Per-run context with params, adapters and earlier payloads

        Returns:
            The adapter's OperationResult

        Raises:
            TaskbridgeError: On any failure; the runner aborts the workflow
        """
        ...

    def compensate(self, context: WorkflowContext, payload: OperationResult) -> None:
        """Undo this step's side effect. Used only when compensation is enabled."""
        return None
