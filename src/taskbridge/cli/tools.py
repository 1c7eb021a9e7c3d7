"""CLI commands for direct service operations (GitHub, Trello, docs, WP-CLI)."""

from typing import NoReturn, Optional

import typer

from taskbridge.core.config import AppConfig
from taskbridge.core.docs import load_documentation
from taskbridge.core.errors import TaskbridgeError
from taskbridge.core.models import OperationResult
from taskbridge.core.shell import CommandRunner
from taskbridge.core.workflow.runner import build_github_adapter, build_trello_adapter

app = typer.Typer(help="Direct GitHub, Trello, documentation and WP-CLI operations")


def _echo_result(result: OperationResult) -> None:
    typer.echo(result.text)


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"❌ Error: {error}", err=True)
    raise typer.Exit(1)


@app.command("github")
def github(
    action: str = typer.Argument(..., help="list_repos, list_branches, create_branch, ..."),
    repo: str = typer.Option("", "--repo", help="Configured repository name"),
    branch: Optional[str] = typer.Option(None, "--branch", help="Branch name"),
    title: Optional[str] = typer.Option(None, "--title", help="Pull request title"),
    description: Optional[str] = typer.Option(None, "--description", help="Branch description"),
    path: Optional[str] = typer.Option(None, "--path", help="File path in the repository"),
    content: Optional[str] = typer.Option(None, "--content", help="New file content"),
    message: Optional[str] = typer.Option(None, "--message", help="Commit message"),
):
    """Run a single GitHub operation.

    Example:
        taskbridge tool github create_branch --repo web --branch feature/login
    """
    try:
        adapter = build_github_adapter()
        result = adapter.run(
            action,
            repo_name=repo,
            branch=branch,
            title=title,
            description=description or "",
            path=path,
            content=content,
            message=message or "",
        )
    except (TaskbridgeError, ValueError) as e:
        _fail(e)
    _echo_result(result)


@app.command("trello")
def trello(
    action: str = typer.Argument(..., help="list_boards, list_lists, create_card, ..."),
    board_id: Optional[str] = typer.Option(None, "--board-id", help="Trello board ID"),
    list_id: Optional[str] = typer.Option(None, "--list-id", help="Trello list ID"),
    card_id: Optional[str] = typer.Option(None, "--card-id", help="Trello card ID"),
    title: Optional[str] = typer.Option(None, "--title", help="Card title"),
    description: Optional[str] = typer.Option(None, "--description", help="Card description"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date in ISO format"),
    closed: Optional[bool] = typer.Option(
        None, "--closed/--open", help="Close or reopen the card (update_card)"
    ),
    text: Optional[str] = typer.Option(None, "--text", help="Comment text"),
):
    """Run a single Trello operation.

    Example:
        taskbridge tool trello move_card --card-id abc --list-id def
    """
    try:
        adapter = build_trello_adapter()
        result = adapter.run(
            action,
            board_id=board_id,
            list_id=list_id,
            card_id=card_id,
            title=title,
            description=description,
            due=due,
            closed=closed,
            text=text,
        )
    except (TaskbridgeError, ValueError) as e:
        _fail(e)
    _echo_result(result)


@app.command("docs")
def docs(
    action: str = typer.Argument(..., help="list, get, search, rules or guidelines"),
    document: Optional[str] = typer.Option(
        None, "--document", "-d", help="Document name, rules category or action type"
    ),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Search query"),
):
    """Look up company documentation and rules."""
    try:
        store = load_documentation(AppConfig.from_env().docs_dir)
        result = store.run(action, document=document, query=query)
    except (TaskbridgeError, ValueError) as e:
        _fail(e)
    _echo_result(result)


@app.command("wp")
def wp(command: str = typer.Argument(..., help="WP-CLI command to execute")):
    """Run a WP-CLI command in the configured WordPress directory.

    Example:
        taskbridge tool wp "plugin list"
    """
    try:
        runner = CommandRunner(AppConfig.from_env().wp_path)
        result = runner.run(command)
    except (TaskbridgeError, ValueError) as e:
        _fail(e)
    _echo_result(result)
