"""Trello REST adapter."""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from taskbridge.core.adapters.base import (
    HttpAdapter,
    TaskBoardAdapter,
    parse_action,
    require_arg,
)
from taskbridge.core.errors import AdapterError
from taskbridge.core.models import OperationResult

logger = logging.getLogger(__name__)

# Card fields accepted by update_card, mapped to Trello's names
CARD_FIELDS = {
    "title": "name",
    "description": "desc",
    "due": "due",
    "closed": "closed",
}


class TrelloAction(str, Enum):
    LIST_BOARDS = "list_boards"
    LIST_LISTS = "list_lists"
    CREATE_CARD = "create_card"
    LIST_CARDS = "list_cards"
    UPDATE_CARD = "update_card"
    MOVE_CARD = "move_card"
    ADD_COMMENT = "add_comment"


def _card_data(card: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": card.get("id"),
        "name": card.get("name"),
        "url": card.get("url"),
        "list_id": card.get("idList"),
        "closed": card.get("closed", False),
    }


class TrelloAdapter(HttpAdapter, TaskBoardAdapter):
    """Card and board operations against the Trello REST API."""

    service_label = "Trello"

    def __init__(
        self,
        api_key: str,
        token: str,
        board_id: Optional[str] = None,
        list_id: Optional[str] = None,
        api_url: str = "https://api.trello.com",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key or not token:
            raise ValueError("Trello API key and token are required")
        super().__init__(
            api_url,
            timeout=timeout,
            params={"key": api_key, "token": token},
            client=client,
        )
        self.default_board_id = board_id
        self.default_list_id = list_id

    def run(self, action: Any, **args: Any) -> OperationResult:
        """Dispatch a Trello action tag to its operation.

        Raises:
            UnknownAction: If the tag is not a TrelloAction
        """
        tag = parse_action(TrelloAction, action, scope="Trello")
        if tag is TrelloAction.LIST_BOARDS:
            return self.list_boards()
        if tag is TrelloAction.LIST_LISTS:
            return self.list_lists(args.get("board_id"))
        if tag is TrelloAction.CREATE_CARD:
            return self.create_card(
                args.get("list_id"),
                require_arg(args, "title", tag),
                args.get("description") or "",
                due=args.get("due"),
                labels=args.get("labels"),
                members=args.get("members"),
            )
        if tag is TrelloAction.LIST_CARDS:
            return self.list_cards(args.get("list_id"))
        if tag is TrelloAction.UPDATE_CARD:
            card_id = require_arg(args, "card_id", tag)
            fields = {k: v for k, v in args.items() if k in CARD_FIELDS}
            return self.update_card(card_id, **fields)
        if tag is TrelloAction.MOVE_CARD:
            return self.move_card(
                require_arg(args, "card_id", tag), require_arg(args, "list_id", tag)
            )
        return self.add_comment(require_arg(args, "card_id", tag), require_arg(args, "text", tag))

    def list_boards(self) -> OperationResult:
        boards = self._request("GET", "/1/members/me/boards") or []
        lines = [
            f"• **{b['name']}** (ID: {b['id']})\n"
            f"  URL: {b.get('url', '')}\n"
            f"  Status: {'Closed' if b.get('closed') else 'Open'}"
            for b in boards
        ]
        return OperationResult(
            text="**Trello Boards:**\n\n" + "\n\n".join(lines),
            data={"boards": [{"id": b["id"], "name": b["name"]} for b in boards]},
        )

    def list_lists(self, board_id: Optional[str] = None) -> OperationResult:
        target = board_id or self.default_board_id
        if not target:
            raise AdapterError("Board ID is required. Use list_boards to find board IDs.")
        lists = self._request("GET", f"/1/boards/{target}/lists") or []
        lines = [
            f"• **{lst['name']}** (ID: {lst['id']})\n"
            f"  Status: {'Closed' if lst.get('closed') else 'Open'}\n"
            f"  Position: {lst.get('pos')}"
            for lst in lists
        ]
        return OperationResult(
            text="**Lists in Board:**\n\n" + "\n\n".join(lines),
            data={"lists": [{"id": lst["id"], "name": lst["name"]} for lst in lists]},
        )

    def create_card(
        self,
        list_id: Optional[str],
        title: str,
        description: str = "",
        due: Optional[str] = None,
        labels: Optional[List[str]] = None,
        members: Optional[List[str]] = None,
    ) -> OperationResult:
        target = list_id or self.default_list_id
        if not target:
            raise AdapterError("List ID is required. Use list_lists to find list IDs.")

        payload: Dict[str, Any] = {"name": title, "desc": description or "", "idList": target}
        if due:
            payload["due"] = due
        if labels:
            payload["idLabels"] = ",".join(labels)
        if members:
            payload["idMembers"] = ",".join(members)

        card = self._request("POST", "/1/cards", params=payload)
        logger.info("Created Trello card %s in list %s", card.get("id"), target)
        label_names = ", ".join(label["name"] for label in card.get("labels") or []) or "None"
        return OperationResult(
            text=(
                "**Trello Card Created Successfully!**\n\n"
                f"**Title:** {card.get('name')}\n"
                f"**Description:** {card.get('desc') or 'No description'}\n"
                f"**URL:** {card.get('url')}\n"
                f"**Due Date:** {card.get('due') or 'Not set'}\n"
                f"**Labels:** {label_names}"
            ),
            data=_card_data(card),
        )

    def list_cards(self, list_id: Optional[str] = None) -> OperationResult:
        target = list_id or self.default_list_id
        if not target:
            raise AdapterError("List ID is required. Use list_lists to find list IDs.")
        cards = self._request("GET", f"/1/lists/{target}/cards") or []
        lines = [
            f"• **{c['name']}** (ID: {c['id']})\n"
            f"  Description: {c.get('desc') or 'No description'}\n"
            f"  Due: {c.get('due') or 'Not set'}\n"
            f"  Status: {'Closed' if c.get('closed') else 'Open'}\n"
            f"  URL: {c.get('url')}"
            for c in cards
        ]
        return OperationResult(
            text="**Cards in List:**\n\n" + "\n\n".join(lines),
            data={"cards": [_card_data(c) for c in cards]},
        )

    def update_card(self, card_id: str, **fields: Any) -> OperationResult:
        if not card_id:
            raise AdapterError("Card ID is required for updating.")
        unknown = set(fields) - set(CARD_FIELDS)
        if unknown:
            raise AdapterError(f"Unsupported card fields: {', '.join(sorted(unknown))}")

        payload = {CARD_FIELDS[k]: v for k, v in fields.items() if v is not None}
        if "closed" in payload:
            payload["closed"] = "true" if payload["closed"] else "false"

        card = self._request("PUT", f"/1/cards/{card_id}", params=payload)
        return OperationResult(
            text=(
                "**Card Updated Successfully!**\n\n"
                f"**Title:** {card.get('name')}\n"
                f"**Description:** {card.get('desc') or 'No description'}\n"
                f"**URL:** {card.get('url')}\n"
                f"**Due Date:** {card.get('due') or 'Not set'}"
            ),
            data=_card_data(card),
        )

    def move_card(self, card_id: str, list_id: str) -> OperationResult:
        if not card_id or not list_id:
            raise AdapterError("Both Card ID and List ID are required for moving.")
        card = self._request("PUT", f"/1/cards/{card_id}", params={"idList": list_id})
        return OperationResult(
            text=(
                "**Card Moved Successfully!**\n\n"
                f"**Card:** {card.get('name')}\n"
                f"**New List:** {card.get('idList') or list_id}\n"
                f"**URL:** {card.get('url')}"
            ),
            data=_card_data(card),
        )

    def add_comment(self, card_id: str, text: str) -> OperationResult:
        if not card_id or not text:
            raise AdapterError("Both Card ID and comment text are required.")
        action = self._request(
            "POST", f"/1/cards/{card_id}/actions/comments", params={"text": text}
        )
        author = (action.get("memberCreator") or {}).get("fullName", "Unknown")
        return OperationResult(
            text=(
                "**Comment Added Successfully!**\n\n"
                f"**Comment:** {(action.get('data') or {}).get('text', text)}\n"
                f"**Author:** {author}\n"
                f"**Date:** {action.get('date', '')}"
            ),
            data={"id": action.get("id"), "card_id": card_id},
        )
