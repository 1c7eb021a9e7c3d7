"""Main workflow entry point.

Builds the adapters and orchestrator from environment configuration and
runs a single workflow.
"""

from typing import Any, Mapping, Optional

from taskbridge.core.adapters.github import GitHubAdapter
from taskbridge.core.adapters.trello import TrelloAdapter
from taskbridge.core.config import AppConfig, GitHubConfig, TrelloConfig
from taskbridge.core.workflow.orchestrator import WorkflowOrchestrator
from taskbridge.core.workflow.step_base import CancellationToken
from taskbridge.core.workflow.types import WorkflowOutcome


def build_github_adapter(app_config: Optional[AppConfig] = None) -> GitHubAdapter:
    """Create the GitHub adapter from environment configuration."""
    app_config = app_config or AppConfig.from_env()
    config = GitHubConfig()
    config.validate()
    return GitHubAdapter(
        config.repositories,
        token=config.token,
        api_url=config.api_url,
        timeout=app_config.http_timeout,
    )


def build_trello_adapter(app_config: Optional[AppConfig] = None) -> TrelloAdapter:
    """Create the Trello adapter from environment configuration.

    Raises:
        ValueError: If TRELLO_API_KEY or TRELLO_TOKEN is missing
    """
    app_config = app_config or AppConfig.from_env()
    config = TrelloConfig()
    config.validate()
    assert config.api_key is not None
    assert config.token is not None
    return TrelloAdapter(
        config.api_key,
        config.token,
        board_id=config.board_id,
        list_id=config.list_id,
        api_url=config.api_url,
        timeout=app_config.http_timeout,
    )


def build_orchestrator(compensate_on_abort: bool = False) -> WorkflowOrchestrator:
    """Create an orchestrator wired to GitHub and Trello.

    Raises:
        ValueError: If either service is not configured
    """
    app_config = AppConfig.from_env()
    return WorkflowOrchestrator(
        build_github_adapter(app_config),
        build_trello_adapter(app_config),
        compensate_on_abort=compensate_on_abort,
    )


def execute_workflow(
    kind: Any,
    params: Mapping[str, Any],
    cancel_token: Optional[CancellationToken] = None,
    compensate_on_abort: bool = False,
) -> WorkflowOutcome:
    """Run one workflow against the configured services.

    Args:
        kind: WorkflowKind or its string value
        params: Workflow parameters
        cancel_token: Optional token for abandoning the run between steps
        compensate_on_abort: Undo completed steps when the run aborts

    Returns:
        WorkflowOutcome for the run
    """
    orchestrator = build_orchestrator(compensate_on_abort=compensate_on_abort)
    return orchestrator.run(kind, params, cancel_token=cancel_token)
