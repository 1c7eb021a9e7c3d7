"""Tests for workflow orchestration across the GitHub and Trello adapters."""

from unittest.mock import Mock

import httpx
import pytest

from taskbridge.core.adapters.base import TaskBoardAdapter, VersionControlAdapter
from taskbridge.core.adapters.github import GitHubAdapter
from taskbridge.core.errors import AdapterError, ErrorKind, NotFound, UnknownAction
from taskbridge.core.models import OperationResult, Repository
from taskbridge.core.workflow import (
    CancellationToken,
    RunState,
    ServiceTag,
    WorkflowKind,
    WorkflowOrchestrator,
    dispatch_workflow_action,
    normalize_params,
)
from taskbridge.core.workflow.workflow_registry import reset_workflow_registry


@pytest.fixture(autouse=True)
def _reset_registry():
    reset_workflow_registry()
    yield
    reset_workflow_registry()


@pytest.fixture
def vcs():
    adapter = Mock(spec=VersionControlAdapter)
    adapter.create_branch.return_value = OperationResult(
        text="Created branch 'feature/login' from 'develop' in acme/web",
        data={"branch": "feature/login", "repo": "acme/web", "repo_name": "web"},
    )
    adapter.create_pull_request.return_value = OperationResult(
        text="Created PR #7: https://github.com/acme/web/pull/7",
        data={"number": 7, "url": "https://github.com/acme/web/pull/7"},
    )
    adapter.delete_branch.return_value = OperationResult(
        text="Deleted branch 'feature/login' in acme/web", data={"branch": "feature/login"}
    )
    return adapter


@pytest.fixture
def board():
    adapter = Mock(spec=TaskBoardAdapter)
    adapter.create_card.return_value = OperationResult(
        text="Trello Card Created Successfully!", data={"id": "card1", "url": "https://trello/c/1"}
    )
    adapter.move_card.return_value = OperationResult(
        text="Card Moved Successfully!", data={"id": "card1", "list_id": "review"}
    )
    adapter.update_card.return_value = OperationResult(
        text="Card Updated Successfully!", data={"id": "card1", "closed": True}
    )
    adapter.add_comment.return_value = OperationResult(
        text="Comment Added Successfully!", data={"id": "comment1", "card_id": "card1"}
    )
    return adapter


@pytest.fixture
def task_params():
    return {
        "repo_name": "web",
        "branch_name": "feature/login",
        "task_title": "Login page",
        "task_description": "Build the login page",
        "trello_list_id": "todo",
    }


def _services_and_actions(outcome):
    return [(step.service, step.action) for step in outcome.steps]


class TestTaskCreation:
    def test_success_records_both_steps_in_order(self, vcs, board, task_params):
        orchestrator = WorkflowOrchestrator(vcs, board)
        outcome = orchestrator.run(WorkflowKind.TASK_CREATION, task_params)

        assert outcome.success
        assert outcome.state == RunState.COMPLETED
        assert outcome.message == "Task workflow completed successfully!"
        assert _services_and_actions(outcome) == [
            (ServiceTag.VERSION_CONTROL, "branch_created"),
            (ServiceTag.TASK_BOARD, "card_created"),
        ]
        vcs.create_branch.assert_called_once_with("web", "feature/login", description="Login page")

    def test_card_description_references_branch_and_repository(self, vcs, board, task_params):
        WorkflowOrchestrator(vcs, board).run(WorkflowKind.TASK_CREATION, task_params)

        args, kwargs = board.create_card.call_args
        list_id, title, description = args
        assert list_id == "todo"
        assert title == "Login page"
        assert description.startswith("Build the login page")
        assert "feature/login" in description
        assert "web" in description
        assert kwargs == {"due": None}

    def test_due_date_is_passed_to_card(self, vcs, board, task_params):
        task_params["due_date"] = "2026-11-01T00:00:00.000Z"
        WorkflowOrchestrator(vcs, board).run(WorkflowKind.TASK_CREATION, task_params)
        assert board.create_card.call_args.kwargs["due"] == "2026-11-01T00:00:00.000Z"

    def test_policy_violation_aborts_with_no_steps(self, board, task_params):
        def fail_on_request(request):
            raise AssertionError(f"unexpected remote call: {request.url}")

        github = GitHubAdapter(
            [Repository(name="web", repo="acme/web")],
            client=httpx.Client(
                base_url="https://api.github.com", transport=httpx.MockTransport(fail_on_request)
            ),
        )
        task_params["branch_name"] = "xyz-thing"

        outcome = WorkflowOrchestrator(github, board).run(WorkflowKind.TASK_CREATION, task_params)

        assert not outcome.success
        assert outcome.state == RunState.ABORTED
        assert outcome.steps == []
        assert outcome.error_kind == ErrorKind.POLICY_VIOLATION
        assert outcome.failed_step == "Creating branch"
        assert "Branch name must start with one of" in outcome.message
        board.create_card.assert_not_called()

    def test_card_failure_keeps_branch_and_records_one_step(self, vcs, board, task_params):
        board.create_card.side_effect = NotFound("Trello resource not found: /1/cards")

        outcome = WorkflowOrchestrator(vcs, board).run(WorkflowKind.TASK_CREATION, task_params)

        assert not outcome.success
        assert outcome.message == "Workflow failed: Trello resource not found: /1/cards"
        assert outcome.error_kind == ErrorKind.NOT_FOUND
        assert _services_and_actions(outcome) == [(ServiceTag.VERSION_CONTROL, "branch_created")]
        # No rollback by default
        vcs.delete_branch.assert_not_called()

    def test_compensation_option_rolls_back_branch(self, vcs, board, task_params):
        board.create_card.side_effect = AdapterError("Trello API error 500")

        orchestrator = WorkflowOrchestrator(vcs, board, compensate_on_abort=True)
        outcome = orchestrator.run(WorkflowKind.TASK_CREATION, task_params)

        assert not outcome.success
        assert len(outcome.steps) == 1
        vcs.delete_branch.assert_called_once_with("web", "feature/login")

    def test_missing_required_params_fail_before_remote_calls(self, vcs, board):
        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.TASK_CREATION, {"repo_name": "web", "branch_name": "feature/x"}
        )

        assert not outcome.success
        assert outcome.steps == []
        assert "task_title" in outcome.message
        assert "trello_list_id" in outcome.message
        vcs.create_branch.assert_not_called()
        board.create_card.assert_not_called()

    def test_camel_case_params_are_accepted(self, vcs, board):
        outcome = WorkflowOrchestrator(vcs, board).run(
            "task-creation",
            {
                "repoName": "web",
                "branchName": "feature/login",
                "taskTitle": "Login page",
                "taskDescription": "Build it",
                "trelloListId": "todo",
                "dueDate": "2026-11-01",
            },
        )
        assert outcome.success
        assert board.create_card.call_args.kwargs["due"] == "2026-11-01"

    def test_unexpected_exception_becomes_failed_outcome(self, vcs, board, task_params):
        vcs.create_branch.side_effect = RuntimeError("boom")

        outcome = WorkflowOrchestrator(vcs, board).run(WorkflowKind.TASK_CREATION, task_params)

        assert not outcome.success
        assert outcome.message == "Workflow failed: boom"
        assert outcome.error_kind == ErrorKind.ADAPTER_ERROR


class TestReviewTransition:
    @pytest.fixture
    def review_params(self):
        return {"repo_name": "web", "branch_name": "feature/login", "pr_title": "Add login"}

    def test_without_card_params_only_creates_pr(self, vcs, board, review_params):
        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.REVIEW_TRANSITION, review_params
        )

        assert outcome.success
        assert _services_and_actions(outcome) == [(ServiceTag.VERSION_CONTROL, "pr_created")]
        vcs.create_pull_request.assert_called_once_with("web", "feature/login", "Add login")
        board.move_card.assert_not_called()
        board.add_comment.assert_not_called()

    def test_only_one_card_param_skips_move(self, vcs, board, review_params):
        review_params["card_id"] = "card1"
        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.REVIEW_TRANSITION, review_params
        )

        assert outcome.success
        assert len(outcome.steps) == 1
        board.move_card.assert_not_called()

    def test_with_card_params_moves_and_comments(self, vcs, board, review_params):
        review_params.update(card_id="card1", review_list_id="review")

        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.REVIEW_TRANSITION, review_params
        )

        assert outcome.success
        assert [step.action for step in outcome.steps] == [
            "pr_created",
            "card_moved",
            "comment_added",
        ]
        board.move_card.assert_called_once_with("card1", "review")
        card_id, text = board.add_comment.call_args.args
        assert card_id == "card1"
        assert "Add login" in text
        assert "https://github.com/acme/web/pull/7" in text

    def test_move_failure_skips_comment(self, vcs, board, review_params):
        review_params.update(card_id="card1", review_list_id="review")
        board.move_card.side_effect = NotFound("Trello resource not found: /1/cards/card1")

        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.REVIEW_TRANSITION, review_params
        )

        assert not outcome.success
        assert outcome.message.startswith("PR workflow failed: ")
        assert [step.action for step in outcome.steps] == ["pr_created"]
        board.add_comment.assert_not_called()

    def test_pr_failure_aborts_everything(self, vcs, board, review_params):
        review_params.update(card_id="card1", review_list_id="review")
        vcs.create_pull_request.side_effect = AdapterError("GitHub API error 422")

        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.REVIEW_TRANSITION, review_params
        )

        assert not outcome.success
        assert outcome.steps == []
        board.move_card.assert_not_called()


class TestCompletion:
    @pytest.fixture
    def completion_params(self):
        return {"card_id": "card1", "repo_name": "web", "branch_name": "feature/login"}

    def test_closes_card_then_comments(self, vcs, board, completion_params):
        outcome = WorkflowOrchestrator(vcs, board).run(WorkflowKind.COMPLETION, completion_params)

        assert outcome.success
        assert outcome.message == "Task completion workflow finished!"
        assert _services_and_actions(outcome) == [
            (ServiceTag.TASK_BOARD, "card_completed"),
            (ServiceTag.TASK_BOARD, "completion_comment_added"),
        ]
        board.update_card.assert_called_once_with("card1", closed=True)
        vcs.delete_branch.assert_not_called()

    def test_comment_failure_keeps_card_closed(self, vcs, board, completion_params):
        board.add_comment.side_effect = AdapterError("Trello API error 401")

        outcome = WorkflowOrchestrator(vcs, board).run(WorkflowKind.COMPLETION, completion_params)

        assert not outcome.success
        assert outcome.message == "Completion workflow failed: Trello API error 401"
        assert [step.action for step in outcome.steps] == ["card_completed"]

    def test_delete_branch_when_requested(self, vcs, board, completion_params):
        completion_params["delete_branch"] = True

        outcome = WorkflowOrchestrator(vcs, board).run(WorkflowKind.COMPLETION, completion_params)

        assert outcome.success
        assert outcome.steps[-1].action == "branch_deleted"
        assert outcome.steps[-1].service == ServiceTag.VERSION_CONTROL
        vcs.delete_branch.assert_called_once_with("web", "feature/login")


class TestDispatchAndKinds:
    def test_unknown_kind_returns_failed_outcome(self, vcs, board):
        outcome = WorkflowOrchestrator(vcs, board).run("deploy", {})

        assert not outcome.success
        assert outcome.error_kind == ErrorKind.UNKNOWN_WORKFLOW_KIND
        assert "deploy" in outcome.message
        vcs.assert_not_called()

    def test_dispatch_maps_action_tags(self, vcs, board, task_params):
        outcome = dispatch_workflow_action(
            WorkflowOrchestrator(vcs, board), "create_task_with_card", task_params
        )
        assert outcome.success
        assert len(outcome.steps) == 2

    def test_dispatch_rejects_unknown_action_before_remote_calls(self, vcs, board):
        with pytest.raises(UnknownAction) as exc_info:
            dispatch_workflow_action(WorkflowOrchestrator(vcs, board), "delete_repo", {})

        assert exc_info.value.kind == ErrorKind.UNKNOWN_ACTION
        assert "create_task_with_card" in str(exc_info.value)
        vcs.create_branch.assert_not_called()

    def test_cancelled_token_aborts_before_first_step(self, vcs, board, task_params):
        token = CancellationToken()
        token.cancel()

        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.TASK_CREATION, task_params, cancel_token=token
        )

        assert not outcome.success
        assert outcome.error_kind == ErrorKind.CANCELLED
        assert outcome.steps == []
        vcs.create_branch.assert_not_called()

    def test_cancel_between_steps_keeps_ledger(self, vcs, board, task_params):
        token = CancellationToken()

        def create_branch_then_cancel(*args, **kwargs):
            token.cancel()
            return OperationResult(text="created", data={"branch": "feature/login"})

        vcs.create_branch.side_effect = create_branch_then_cancel

        outcome = WorkflowOrchestrator(vcs, board).run(
            WorkflowKind.TASK_CREATION, task_params, cancel_token=token
        )

        assert not outcome.success
        assert [step.action for step in outcome.steps] == ["branch_created"]
        assert "Creating card" in outcome.message
        board.create_card.assert_not_called()


def test_identical_inputs_give_identical_outcomes(task_params):
    outcomes = []
    for _ in range(2):
        vcs = Mock(spec=VersionControlAdapter)
        vcs.create_branch.return_value = OperationResult(text="b", data={"branch": "feature/login"})
        board = Mock(spec=TaskBoardAdapter)
        board.create_card.side_effect = AdapterError("Trello API error 503")
        outcomes.append(
            WorkflowOrchestrator(vcs, board).run(WorkflowKind.TASK_CREATION, dict(task_params))
        )

    assert outcomes[0] == outcomes[1]
    assert outcomes[0] is not outcomes[1]


def test_normalize_params_prefers_snake_case():
    assert normalize_params({"repoName": "a", "repo_name": "b", "cardId": "c"}) == {
        "repo_name": "b",
        "card_id": "c",
    }


@pytest.mark.parametrize("value,expected", [("true", True), ("false", False), ("0", False)])
def test_delete_branch_flag_from_string_params(vcs, board, value, expected):
    outcome = WorkflowOrchestrator(vcs, board).run(
        WorkflowKind.COMPLETION,
        {"card_id": "card1", "repo_name": "web", "branch_name": "feature/x", "deleteBranch": value},
    )
    assert outcome.success
    assert vcs.delete_branch.called is expected
