"""Tests for building adapters and orchestrators from the environment."""

from unittest.mock import patch

import pytest

from taskbridge.core.workflow.runner import (
    build_github_adapter,
    build_orchestrator,
    build_trello_adapter,
    execute_workflow,
)


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKBRIDGE_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("TASKBRIDGE_GITHUB_REPOS", '[{"name": "web", "repo": "acme/web"}]')
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_x")
    monkeypatch.setenv("TRELLO_API_KEY", "k")
    monkeypatch.setenv("TRELLO_TOKEN", "t")
    monkeypatch.setenv("TRELLO_LIST_ID", "todo")
    monkeypatch.setenv("TASKBRIDGE_HTTP_TIMEOUT", "7")


def test_build_github_adapter(env):
    adapter = build_github_adapter()
    assert [r.name for r in adapter.repositories] == ["web"]
    assert adapter._client.timeout.read == 7.0
    adapter.close()


def test_build_trello_adapter(env):
    adapter = build_trello_adapter()
    assert adapter.default_list_id == "todo"
    adapter.close()


def test_build_trello_adapter_unconfigured(env, monkeypatch):
    monkeypatch.delenv("TRELLO_TOKEN")
    with pytest.raises(ValueError, match="TRELLO_TOKEN"):
        build_trello_adapter()


def test_build_orchestrator_requires_github_token(env, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN")
    with pytest.raises(ValueError, match="GITHUB_TOKEN"):
        build_orchestrator()


def test_execute_workflow_rejects_invalid_branch_without_http(env):
    with patch("httpx.Client.request") as mock_request:
        outcome = execute_workflow(
            "task-creation",
            {
                "repoName": "web",
                "branchName": "wip",
                "taskTitle": "T",
                "taskDescription": "D",
                "trelloListId": "todo",
            },
        )

    assert not outcome.success
    assert outcome.steps == []
    mock_request.assert_not_called()
