"""Taskbridge CLI - GitHub + Trello task workflows."""

from typing import Any, Dict, List, Optional

import typer
from dotenv import load_dotenv

from taskbridge import __version__
from taskbridge.cli.tools import app as tools_app
from taskbridge.core.errors import TaskbridgeError
from taskbridge.core.policy import validate_branch_name
from taskbridge.core.utils import make_run_id, setup_logger
from taskbridge.core.workflow import (
    WorkflowKind,
    WorkflowOutcome,
    dispatch_workflow_action,
    render_outcome,
)
from taskbridge.core.workflow.runner import build_orchestrator

# Load environment variables
load_dotenv()

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=True,
    help="Taskbridge CLI - GitHub + Trello task workflows",
)
app.add_typer(tools_app, name="tool")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Taskbridge CLI version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Taskbridge CLI - GitHub + Trello task workflows."""
    pass


def _emit_outcome(outcome: WorkflowOutcome) -> None:
    report = render_outcome(outcome)
    if outcome.success:
        typer.echo(report)
        return
    typer.echo(report, err=True)
    raise typer.Exit(1)


def _run_workflow(kind: WorkflowKind, params: Dict[str, Any], compensate: bool) -> None:
    setup_logger(make_run_id())
    try:
        orchestrator = build_orchestrator(compensate_on_abort=compensate)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _emit_outcome(orchestrator.run(kind, params))


def parse_params(values: List[str]) -> Dict[str, str]:
    """Parse ``key=value`` pairs into a dict.

    Raises:
        typer.BadParameter: If a pair has no '='
    """
    params: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        params[key.strip()] = value
    return params


@app.command("validate-branch")
def validate_branch(name: str):
    """Check a branch name against the company naming rules.

    Example:
        taskbridge validate-branch feature/login-fix
    """
    verdict = validate_branch_name(name)
    if verdict.valid:
        typer.echo(f"✅ {verdict.explanation}")
        return
    typer.echo(f"❌ Branch name validation failed: {verdict.explanation}", err=True)
    typer.echo(verdict.guidance, err=True)
    raise typer.Exit(1)


@app.command("create-task")
def create_task(
    repo: str = typer.Option(..., "--repo", help="Configured repository name"),
    branch: str = typer.Option(..., "--branch", help="Branch to create"),
    title: str = typer.Option(..., "--title", help="Task title for the branch and card"),
    description: str = typer.Option(..., "--description", help="Task description"),
    list_id: str = typer.Option(..., "--list-id", help="Trello list for the new card"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date in ISO format"),
    compensate: bool = typer.Option(
        False, "--compensate", help="Undo completed steps if a later step fails"
    ),
):
    """Create a GitHub branch and a matching Trello card.

    Example:
        taskbridge create-task --repo web --branch feature/login \\
            --title "Login" --description "Add login" --list-id abc123
    """
    _run_workflow(
        WorkflowKind.TASK_CREATION,
        {
            "repo_name": repo,
            "branch_name": branch,
            "task_title": title,
            "task_description": description,
            "trello_list_id": list_id,
            "due_date": due,
        },
        compensate,
    )


@app.command("open-review")
def open_review(
    repo: str = typer.Option(..., "--repo", help="Configured repository name"),
    branch: str = typer.Option(..., "--branch", help="Head branch of the PR"),
    title: str = typer.Option(..., "--title", help="Pull request title"),
    card_id: Optional[str] = typer.Option(None, "--card-id", help="Trello card to move"),
    review_list_id: Optional[str] = typer.Option(
        None, "--review-list-id", help="Trello list for cards in review"
    ),
    compensate: bool = typer.Option(
        False, "--compensate", help="Undo completed steps if a later step fails"
    ),
):
    """Open a pull request and move the card to review.

    The card is moved and commented on only when both --card-id and
    --review-list-id are given.
    """
    _run_workflow(
        WorkflowKind.REVIEW_TRANSITION,
        {
            "repo_name": repo,
            "branch_name": branch,
            "pr_title": title,
            "card_id": card_id,
            "review_list_id": review_list_id,
        },
        compensate,
    )


@app.command("complete-task")
def complete_task(
    card_id: str = typer.Option(..., "--card-id", help="Trello card to close"),
    repo: str = typer.Option(..., "--repo", help="Configured repository name"),
    branch: str = typer.Option(..., "--branch", help="Task branch"),
    delete_branch: bool = typer.Option(
        False, "--delete-branch", help="Delete the task branch after closing the card"
    ),
    compensate: bool = typer.Option(
        False, "--compensate", help="Undo completed steps if a later step fails"
    ),
):
    """Close the card and add a completion comment."""
    _run_workflow(
        WorkflowKind.COMPLETION,
        {
            "card_id": card_id,
            "repo_name": repo,
            "branch_name": branch,
            "delete_branch": delete_branch,
        },
        compensate,
    )


@app.command("workflow")
def workflow(
    action: str = typer.Argument(
        ...,
        help="create_task_with_card, create_pr_and_update_card or complete_task",
    ),
    param: List[str] = typer.Option(
        [], "--param", "-p", help="Workflow parameter as key=value (repeatable)"
    ),
):
    """Run a workflow by its action tag.

    Example:
        taskbridge workflow create_pr_and_update_card -p repoName=web \\
            -p branchName=feature/login -p prTitle="Add login"
    """
    params = parse_params(param)
    setup_logger(make_run_id())
    try:
        orchestrator = build_orchestrator()
        outcome = dispatch_workflow_action(orchestrator, action, params)
    except (TaskbridgeError, ValueError) as e:
        typer.echo(f"❌ Workflow error: {e}", err=True)
        raise typer.Exit(1)
    _emit_outcome(outcome)


if __name__ == "__main__":
    app()
