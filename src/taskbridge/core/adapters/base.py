"""Adapter interfaces for the version-control and task-board services."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx

from taskbridge.core.errors import AdapterError, NotFound, UnknownAction
from taskbridge.core.models import OperationResult

logger = logging.getLogger(__name__)

ActionT = TypeVar("ActionT", bound=Enum)


def parse_action(action_enum: Type[ActionT], action: Any, scope: str = "") -> ActionT:
    """Resolve an action tag to a member of a closed action enum.

    Args:
        action_enum: The Enum class listing valid actions
        action: An enum member or its string value
        scope: Label used in the error message (e.g. "GitHub")

    Returns:
        The matching enum member

    Raises:
        UnknownAction: If the tag is not a member of the enum
    """
    if isinstance(action, action_enum):
        return action
    try:
        return action_enum(action)
    except ValueError:
        raise UnknownAction(str(action), [m.value for m in action_enum], scope=scope) from None


def require_arg(args: Dict[str, Any], key: str, action: Enum) -> Any:
    """Fetch a required argument for an action, raising AdapterError if absent."""
    value = args.get(key)
    if value is None or value == "":
        raise AdapterError(f"'{key}' is required for {action.value}")
    return value


class HttpAdapter:
    """Shared JSON-over-HTTP plumbing for the concrete adapters.

    Maps transport and status failures onto the Taskbridge error taxonomy:
    HTTP 404 becomes NotFound, everything else AdapterError.
    """

    service_label = "HTTP"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=base_url, timeout=timeout, headers=headers, params=params
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Execute a request and return the decoded JSON body.

        Raises:
            NotFound: On HTTP 404
            AdapterError: On any other HTTP, network or decoding failure
        """
        logger.debug("%s %s %s", self.service_label, method, path)
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            detail = _error_detail(e.response)
            if status == 404:
                raise NotFound(f"{self.service_label} resource not found: {path}") from e
            raise AdapterError(
                f"{self.service_label} API error {status} for {method} {path}: {detail}"
            ) from e
        except httpx.TimeoutException as e:
            raise AdapterError(f"{self.service_label} request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            raise AdapterError(f"{self.service_label} request failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise AdapterError(
                f"{self.service_label} returned a malformed response for {method} {path}"
            ) from e


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


class VersionControlAdapter(ABC):
    """Remote operations against a version-control service."""

    @abstractmethod
    def list_repositories(self) -> OperationResult: ...

    @abstractmethod
    def list_branches(self, repo_name: str) -> OperationResult: ...

    @abstractmethod
    def create_branch(
        self, repo_name: str, branch_name: str, description: str = ""
    ) -> OperationResult:
        """Create a branch from the repository's default branch.

        Implementations must validate the name against the branch policy and
        raise PolicyViolation before any remote call when it fails.
        """
        ...

    @abstractmethod
    def create_pull_request(self, repo_name: str, head: str, title: str) -> OperationResult: ...

    @abstractmethod
    def list_pull_requests(self, repo_name: str) -> OperationResult: ...

    @abstractmethod
    def get_file(self, repo_name: str, path: str) -> OperationResult: ...

    @abstractmethod
    def update_file(
        self, repo_name: str, branch: str, path: str, content: str, message: str = ""
    ) -> OperationResult: ...

    @abstractmethod
    def delete_branch(self, repo_name: str, branch_name: str) -> OperationResult: ...


class TaskBoardAdapter(ABC):
    """Remote operations against a task-board service."""

    @abstractmethod
    def list_boards(self) -> OperationResult: ...

    @abstractmethod
    def list_lists(self, board_id: Optional[str] = None) -> OperationResult: ...

    @abstractmethod
    def create_card(
        self,
        list_id: Optional[str],
        title: str,
        description: str = "",
        due: Optional[str] = None,
        labels: Optional[List[str]] = None,
        members: Optional[List[str]] = None,
    ) -> OperationResult: ...

    @abstractmethod
    def list_cards(self, list_id: Optional[str] = None) -> OperationResult: ...

    @abstractmethod
    def update_card(self, card_id: str, **fields: Any) -> OperationResult: ...

    @abstractmethod
    def move_card(self, card_id: str, list_id: str) -> OperationResult: ...

    @abstractmethod
    def add_comment(self, card_id: str, text: str) -> OperationResult: ...
