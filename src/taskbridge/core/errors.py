"""Error taxonomy for adapters, dispatch points and workflows.

Every failure raised inside Taskbridge is a ``TaskbridgeError`` carrying an
``ErrorKind`` so that callers can branch on the kind while still showing the
plain message to a user. The original exception, when there is one, is kept
as ``__cause__`` via ``raise ... from``.
"""

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from taskbridge.core.policy import ValidationVerdict


class ErrorKind(str, Enum):
    """Discriminator for structured failures."""

    POLICY_VIOLATION = "policy_violation"
    NOT_FOUND = "not_found"
    ADAPTER_ERROR = "adapter_error"
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_WORKFLOW_KIND = "unknown_workflow_kind"
    CANCELLED = "cancelled"


class TaskbridgeError(Exception):
    """Base class for all Taskbridge failures."""

    kind: ErrorKind = ErrorKind.ADAPTER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AdapterError(TaskbridgeError):
    """A remote call failed (auth, network, malformed response, bad input)."""

    kind = ErrorKind.ADAPTER_ERROR


class NotFound(AdapterError):
    """A referenced repository, card, list, file or document does not exist."""

    kind = ErrorKind.NOT_FOUND


class PolicyViolation(AdapterError):
    """A proposed branch name was rejected by a policy rule.

    Attributes:
        verdict: The failing ValidationVerdict
    """

    kind = ErrorKind.POLICY_VIOLATION

    def __init__(self, verdict: "ValidationVerdict") -> None:
        message = f"Branch name validation failed: {verdict.explanation}"
        super().__init__(message)
        self.verdict = verdict

    @property
    def failed_rule(self):
        return self.verdict.failed_rule


class UnknownAction(TaskbridgeError):
    """An unrecognized action tag was passed to a dispatch point."""

    kind = ErrorKind.UNKNOWN_ACTION

    def __init__(self, action: str, available: Iterable[str], scope: str = "") -> None:
        self.action = action
        self.available = sorted(available)
        label = f"Unknown {scope} action" if scope else "Unknown action"
        super().__init__(f"{label}: {action}. Available: {', '.join(self.available)}")


class UnknownWorkflowKind(TaskbridgeError):
    """An unrecognized workflow kind was requested."""

    kind = ErrorKind.UNKNOWN_WORKFLOW_KIND

    def __init__(self, workflow_kind: str, available: Iterable[str]) -> None:
        self.workflow_kind = workflow_kind
        self.available = sorted(available)
        super().__init__(
            f"Unknown workflow kind: {workflow_kind}. Available: {', '.join(self.available)}"
        )


class WorkflowCancelled(TaskbridgeError):
    """A run was abandoned through its cancellation token."""

    kind = ErrorKind.CANCELLED

    def __init__(self, step_name: Optional[str] = None) -> None:
        message = "Workflow cancelled"
        if step_name:
            message += f" before step '{step_name}'"
        super().__init__(message)
