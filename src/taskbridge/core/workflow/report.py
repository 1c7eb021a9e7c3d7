"""Render workflow outcomes as text for the CLI."""

from taskbridge.core.workflow.types import ServiceTag, WorkflowOutcome

SERVICE_LABELS = {
    ServiceTag.VERSION_CONTROL: "GITHUB",
    ServiceTag.TASK_BOARD: "TRELLO",
}


def render_outcome(outcome: WorkflowOutcome) -> str:
    """Render a WorkflowOutcome into a human-readable report.

    A completed run lists each ledger entry with its payload text; an
    aborted run shows only the failure message.
    """
    if not outcome.success:
        return f"❌ {outcome.message}"

    sections = [
        f"**{SERVICE_LABELS[step.service]} - {step.action}:**\n{step.payload.text or 'Completed'}"
        for step in outcome.steps
    ]
    return "\n\n".join([f"✅ {outcome.message}", *sections])
