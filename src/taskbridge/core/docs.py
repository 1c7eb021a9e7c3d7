"""Company documentation lookup.

Documentation markdown files are read once by ``load_documentation`` into an
immutable ``DocumentationStore`` that callers share by reference.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from taskbridge.core.adapters.base import parse_action
from taskbridge.core.errors import NotFound
from taskbridge.core.models import OperationResult

logger = logging.getLogger(__name__)

_TITLE_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)

MAX_MATCHES_PER_DOCUMENT = 5

# Rule categories mapped to the document holding them
RULE_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {
        "git": "git-best-practices",
        "coding": "coding-best-practices",
        "review": "code-review-best-practices",
        "pr": "how-to-make-github-prs",
        "github": "how-to-make-github-prs",
    }
)


@dataclass(frozen=True)
class ActionGuideline:
    documents: Tuple[str, ...]
    summary: str


ACTION_GUIDELINES: Mapping[str, ActionGuideline] = MappingProxyType(
    {
        "create_branch": ActionGuideline(
            ("git-best-practices",),
            "Follow Git branching strategy: feature/fix/enhancement prefixes",
        ),
        "create_pr": ActionGuideline(
            ("how-to-make-github-prs", "code-review-best-practices"),
            "Use proper PR templates, clear descriptions, and link issues",
        ),
        "code_review": ActionGuideline(
            ("code-review-best-practices", "coding-best-practices"),
            "Check functionality, security, performance, and maintainability",
        ),
        "coding": ActionGuideline(
            ("coding-best-practices",),
            "Follow DRY, KISS, SOLID principles with proper naming and documentation",
        ),
    }
)


class DocsAction(str, Enum):
    LIST = "list"
    GET = "get"
    SEARCH = "search"
    RULES = "rules"
    GUIDELINES = "guidelines"


@dataclass(frozen=True)
class Document:
    name: str
    filename: str
    title: str
    summary: str
    content: str


def extract_title(content: str) -> str:
    match = _TITLE_PATTERN.search(content)
    return match.group(1).strip() if match else "Untitled Document"


def extract_summary(content: str, max_lines: int = 3) -> str:
    """Join up to ``max_lines`` plain lines following the first ``# `` heading."""
    lines = content.split("\n")
    title_index = next((i for i, line in enumerate(lines) if line.startswith("# ")), None)
    if title_index is None:
        return "No summary available"

    summary: List[str] = []
    for line in lines[title_index + 1 :]:
        if len(summary) >= max_lines:
            break
        stripped = line.strip()
        if stripped and not stripped.startswith(("#", ">", "---")):
            summary.append(stripped.removeprefix("**").strip())
    return " ".join(summary) or "No summary available"


class DocumentationStore:
    """Read-only lookup table of company documentation."""

    def __init__(self, documents: Mapping[str, Document]) -> None:
        self._documents: Mapping[str, Document] = MappingProxyType(dict(documents))

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, name: object) -> bool:
        return name in self._documents

    @property
    def names(self) -> List[str]:
        return list(self._documents)

    def run(self, action: Any, document: Optional[str] = None, query: Optional[str] = None):
        """Dispatch a docs action tag.

        Raises:
            UnknownAction: If the tag is not a DocsAction
        """
        tag = parse_action(DocsAction, action, scope="docs")
        if tag is DocsAction.LIST:
            return self.list_documents()
        if tag is DocsAction.GET:
            return self.get(document)
        if tag is DocsAction.SEARCH:
            return self.search(query or "")
        if tag is DocsAction.RULES:
            return self.rules(document)
        return self.guidelines(document)

    def list_documents(self) -> OperationResult:
        entries = [
            f"**{doc.title}**\n   File: {doc.filename}\n   {doc.summary}\n"
            for doc in self._documents.values()
        ]
        return OperationResult(
            text="Available Company Documentation:\n\n"
            + "\n".join(entries)
            + "\n\nUse action 'get' with document name to read full content",
            data={"documents": self.names},
        )

    def get(self, name: Optional[str]) -> OperationResult:
        """Return one document, or the listing when no name is given.

        Raises:
            NotFound: If the document does not exist
        """
        if not name:
            return self.list_documents()
        doc = self._documents.get(name)
        if doc is None:
            raise NotFound(f"Document '{name}' not found. Available: {', '.join(self.names)}")
        return OperationResult(
            text=f"**{doc.title}**\n\n{doc.content}",
            data={"name": doc.name, "title": doc.title},
        )

    def search(self, query: str) -> OperationResult:
        """Case-insensitive search returning up to five matching lines per document.

        Raises:
            ValueError: If the query is empty
        """
        if not query:
            raise ValueError("Search query is required")

        term = query.lower()
        results: Dict[str, List[str]] = {}
        for name, doc in self._documents.items():
            if term not in doc.content.lower():
                continue
            matches = [line.strip() for line in doc.content.split("\n") if term in line.lower()]
            results[name] = matches[:MAX_MATCHES_PER_DOCUMENT]

        if not results:
            return OperationResult(
                text=(
                    f'No results found for: "{query}"\n\n'
                    "Try searching for: git, coding, review, PR, best practices, security, etc."
                ),
                data={"matches": {}},
            )

        sections = [
            f"**{self._documents[name].title}** ({name})\n"
            + "\n".join(f"   • {match}" for match in matches)
            + "\n"
            for name, matches in results.items()
        ]
        return OperationResult(
            text=f'Search results for "{query}":\n\n' + "\n".join(sections),
            data={"matches": results},
        )

    def rules(self, category: Optional[str]) -> OperationResult:
        """Return the rules document for a category, or the category listing."""
        if not category:
            lines = [f"• **{key}** - {doc}" for key, doc in RULE_CATEGORIES.items()]
            return OperationResult(
                text="Company Rules Categories:\n\n"
                + "\n".join(lines)
                + "\n\nUse: action='rules', document='git' (or coding, review, pr)",
                data={"categories": list(RULE_CATEGORIES)},
            )
        return self.get(RULE_CATEGORIES.get(category.lower(), category))

    def guidelines(self, action_type: Optional[str]) -> OperationResult:
        """Return guidelines for an action, or the list of known actions."""
        guideline = ACTION_GUIDELINES.get(action_type or "")
        if guideline is None:
            lines = [f"• **{key}** - {g.summary}" for key, g in ACTION_GUIDELINES.items()]
            return OperationResult(
                text="Available Action Guidelines:\n\n"
                + "\n".join(lines)
                + "\n\nUse: action='guidelines', document='create_branch' "
                "(or create_pr, code_review, coding)",
                data={"actions": list(ACTION_GUIDELINES)},
            )

        excerpts = []
        for name in guideline.documents:
            doc = self._documents.get(name)
            if doc is not None:
                head = "\n".join(doc.content.split("\n")[:20])
                excerpts.append(f"**{doc.title}**\n{head}...\n")
        return OperationResult(
            text=f"Guidelines for {action_type}:\n\n{guideline.summary}\n\n" + "\n".join(excerpts),
            data={"action": action_type, "documents": list(guideline.documents)},
        )


def load_documentation(docs_dir: str | Path) -> DocumentationStore:
    """Read every ``*.md`` file in ``docs_dir`` into a DocumentationStore.

    A missing directory yields an empty store.
    """
    path = Path(docs_dir)
    if not path.is_dir():
        logger.warning("Docs directory not found at: %s", path)
        return DocumentationStore({})

    documents: Dict[str, Document] = {}
    for file_path in sorted(path.glob("*.md")):
        content = file_path.read_text(encoding="utf-8")
        documents[file_path.stem] = Document(
            name=file_path.stem,
            filename=file_path.name,
            title=extract_title(content),
            summary=extract_summary(content),
            content=content,
        )

    logger.debug("Loaded %d documentation files from %s", len(documents), path)
    return DocumentationStore(documents)
