"""Tests for the documentation store."""

import logging

import pytest

from taskbridge.core.docs import (
    MAX_MATCHES_PER_DOCUMENT,
    Document,
    DocumentationStore,
    extract_summary,
    extract_title,
    load_documentation,
)
from taskbridge.core.errors import NotFound, UnknownAction

GIT_DOC = """# Git Best Practices

**Use short-lived branches.**
Rebase before opening a PR.
Delete merged branches.
Never force-push shared branches.

## Naming
Use feature/ and fix/ prefixes.
"""

CODING_DOC = """# Coding Best Practices

Keep functions small.
"""


@pytest.fixture
def docs_dir(tmp_path):
    (tmp_path / "git-best-practices.md").write_text(GIT_DOC, encoding="utf-8")
    (tmp_path / "coding-best-practices.md").write_text(CODING_DOC, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(docs_dir):
    return load_documentation(docs_dir)


def test_extract_title_and_summary():
    assert extract_title(GIT_DOC) == "Git Best Practices"
    assert extract_title("no heading") == "Untitled Document"
    assert extract_summary(GIT_DOC) == (
        "Use short-lived branches.** Rebase before opening a PR. Delete merged branches."
    )
    assert extract_summary("plain text") == "No summary available"


def test_load_reads_only_markdown(store):
    assert len(store) == 2
    assert "git-best-practices" in store
    assert "notes" not in store


def test_missing_directory_gives_empty_store(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        store = load_documentation(tmp_path / "missing")
    assert len(store) == 0
    assert "Docs directory not found" in caplog.text


def test_list_documents(store):
    result = store.list_documents()
    assert "**Git Best Practices**" in result.text
    assert "File: git-best-practices.md" in result.text
    assert sorted(result.data["documents"]) == ["coding-best-practices", "git-best-practices"]


def test_get_document(store):
    result = store.get("coding-best-practices")
    assert result.text.startswith("**Coding Best Practices**")
    assert "Keep functions small." in result.text


def test_get_without_name_lists(store):
    assert store.get(None).text.startswith("Available Company Documentation")


def test_get_unknown_document(store):
    with pytest.raises(NotFound, match="Document 'nope' not found. Available: "):
        store.get("nope")


def test_search_is_case_insensitive(store):
    result = store.search("BRANCHES")
    assert list(result.data["matches"]) == ["git-best-practices"]
    assert "Delete merged branches." in result.data["matches"]["git-best-practices"]


def test_search_caps_matches_per_document():
    content = "# Doc\n" + "\n".join(f"line {i} match" for i in range(10))
    store = DocumentationStore(
        {"doc": Document("doc", "doc.md", extract_title(content), "", content)}
    )
    matches = store.search("match").data["matches"]["doc"]
    assert len(matches) == MAX_MATCHES_PER_DOCUMENT


def test_search_without_results(store):
    result = store.search("kubernetes")
    assert result.data == {"matches": {}}
    assert 'No results found for: "kubernetes"' in result.text


def test_search_requires_query(store):
    with pytest.raises(ValueError):
        store.run("search")


def test_rules_category_resolves_document(store):
    assert store.rules("git").data["name"] == "git-best-practices"
    assert store.rules("GIT").data["name"] == "git-best-practices"
    assert "git" in store.rules(None).data["categories"]


def test_rules_for_absent_document(store):
    with pytest.raises(NotFound):
        store.rules("review")


def test_guidelines(store):
    result = store.guidelines("create_branch")
    assert "Follow Git branching strategy" in result.text
    assert "**Git Best Practices**" in result.text
    assert "create_pr" in store.guidelines("unknown").data["actions"]


def test_run_unknown_action(store):
    with pytest.raises(UnknownAction, match="Unknown docs action: delete"):
        store.run("delete")


def test_store_is_read_only(store):
    with pytest.raises(TypeError):
        store._documents["new"] = None
