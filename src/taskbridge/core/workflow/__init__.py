"""Workflow orchestration package for Taskbridge.

This package sequences remote operations across the version-control and
task-board services, where each step implements a common WorkflowStep
interface.

Main components:
- orchestrator: WorkflowOrchestrator entry point and action-tag dispatch
- pipeline: WorkflowRunner and the per-kind step pipelines
- workflow_registry: WorkflowKind and the registry of workflow definitions
- step_base: Abstract WorkflowStep base class, WorkflowContext, CancellationToken
- steps/: Individual step implementations (branch, pull request, card, comment)
- types: StepResult ledger entries and WorkflowOutcome
- report: Text rendering of outcomes
- runner: Environment-configured execute_workflow
"""

from taskbridge.core.workflow.orchestrator import (
    WorkflowOrchestrator,
    dispatch_workflow_action,
    normalize_params,
)
from taskbridge.core.workflow.pipeline import WorkflowRunner
from taskbridge.core.workflow.report import render_outcome
from taskbridge.core.workflow.runner import execute_workflow
from taskbridge.core.workflow.step_base import (
    CancellationToken,
    WorkflowContext,
    WorkflowStep,
)
from taskbridge.core.workflow.types import (
    RunState,
    ServiceTag,
    StepResult,
    WorkflowOutcome,
)
from taskbridge.core.workflow.workflow_registry import (
    WorkflowDefinition,
    WorkflowKind,
    WorkflowRegistry,
    get_workflow_registry,
)

__all__ = [
    # Main entry points
    "WorkflowOrchestrator",
    "dispatch_workflow_action",
    "execute_workflow",
    "normalize_params",
    # Pipeline components
    "WorkflowRunner",
    "WorkflowStep",
    "WorkflowContext",
    "CancellationToken",
    # Registry
    "WorkflowKind",
    "WorkflowDefinition",
    "WorkflowRegistry",
    "get_workflow_registry",
    # Result types
    "StepResult",
    "WorkflowOutcome",
    "ServiceTag",
    "RunState",
    "render_outcome",
]
