from taskbridge.core.errors import ErrorKind
from taskbridge.core.models import OperationResult
from taskbridge.core.workflow.report import render_outcome
from taskbridge.core.workflow.types import ServiceTag, StepResult, WorkflowOutcome


def _step(action, service, text):
    return StepResult(
        step_name=action,
        action=action,
        service=service,
        payload=OperationResult(text=text),
    )


def test_render_success_lists_each_step():
    outcome = WorkflowOutcome.completed(
        "Task workflow completed successfully!",
        [
            _step("branch_created", ServiceTag.VERSION_CONTROL, "Created branch"),
            _step("card_created", ServiceTag.TASK_BOARD, ""),
        ],
    )

    assert render_outcome(outcome) == (
        "✅ Task workflow completed successfully!\n\n"
        "**GITHUB - branch_created:**\nCreated branch\n\n"
        "**TRELLO - card_created:**\nCompleted"
    )


def test_render_failure_shows_only_message():
    outcome = WorkflowOutcome.aborted(
        "Workflow failed: boom",
        [_step("branch_created", ServiceTag.VERSION_CONTROL, "Created branch")],
        error_kind=ErrorKind.ADAPTER_ERROR,
    )
    assert render_outcome(outcome) == "❌ Workflow failed: boom"
