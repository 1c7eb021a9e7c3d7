"""GitHub REST adapter."""

import base64
import logging
from enum import Enum
from typing import Any, List, Optional, Tuple

import httpx

from taskbridge.core.adapters.base import (
    HttpAdapter,
    VersionControlAdapter,
    parse_action,
    require_arg,
)
from taskbridge.core.errors import AdapterError, NotFound, PolicyViolation
from taskbridge.core.models import OperationResult, Repository
from taskbridge.core.policy import validate_branch_name

logger = logging.getLogger(__name__)

PR_GUIDELINES = """**Next Steps - Company PR Guidelines:**
• Add reviewers from your team
• Link related issues using "Closes #123" or "Fixes #123"
• Ensure all CI checks pass
• Update documentation if needed
• Test thoroughly before requesting review
• Use "Squash and merge" for feature branches"""


class GitHubAction(str, Enum):
    LIST_REPOS = "list_repos"
    LIST_BRANCHES = "list_branches"
    CREATE_BRANCH = "create_branch"
    CREATE_PR = "create_pr"
    LIST_PRS = "list_prs"
    GET_FILE = "get_file"
    UPDATE_FILE = "update_file"
    DELETE_BRANCH = "delete_branch"


def build_pr_body(title: str, head: str, base: str) -> str:
    """Render the company pull request template."""
    return f"""## Description
{title}

## Type of Change
- [ ] Bug fix (non-breaking change which fixes an issue)
- [ ] New feature (non-breaking change which adds functionality)
- [ ] Breaking change (fix or feature that would cause existing functionality to not work as expected)
- [ ] Documentation update
- [ ] Code refactoring
- [ ] Performance improvement

## Testing
- [ ] I have tested these changes locally
- [ ] I have added tests that prove my fix is effective or that my feature works
- [ ] New and existing unit tests pass locally with my changes

## Checklist
- [ ] My code follows the company coding standards
- [ ] I have performed a self-review of my own code
- [ ] I have commented my code, particularly in hard-to-understand areas
- [ ] I have made corresponding changes to the documentation
- [ ] My changes generate no new warnings
- [ ] Any dependent changes have been merged and published

## Branch: `{head}` → `{base}`

**Created by:** Taskbridge
**Note:** Please ensure this PR follows all company guidelines before merging."""


class GitHubAdapter(HttpAdapter, VersionControlAdapter):
    """Pure remote operations on the configured GitHub repositories."""

    service_label = "GitHub"

    def __init__(
        self,
        repositories: List[Repository],
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        super().__init__(api_url, timeout=timeout, headers=headers, client=client)
        self.repositories = list(repositories)

    def resolve_repository(self, repo_name: str) -> Repository:
        """Find a configured repository by name or ``owner/repo``.

        Raises:
            NotFound: If no configured repository matches
        """
        for repository in self.repositories:
            if repo_name in (repository.name, repository.repo):
                return repository
        available = ", ".join(r.name for r in self.repositories)
        raise NotFound(f"Repository '{repo_name}' not found. Available repos: {available}")

    def _split(self, repo_name: str) -> Tuple[Repository, str]:
        repository = self.resolve_repository(repo_name)
        return repository, f"/repos/{repository.repo}"

    def run(self, action: Any, repo_name: str = "", **args: Any) -> OperationResult:
        """Dispatch a GitHub action tag to its operation.

        Raises:
            UnknownAction: If the tag is not a GitHubAction
        """
        tag = parse_action(GitHubAction, action, scope="GitHub")
        if tag is GitHubAction.LIST_REPOS:
            return self.list_repositories()
        if not repo_name:
            raise AdapterError(f"repo_name is required for {tag.value}")
        if tag is GitHubAction.LIST_BRANCHES:
            return self.list_branches(repo_name)
        if tag is GitHubAction.CREATE_BRANCH:
            return self.create_branch(
                repo_name, require_arg(args, "branch", tag), args.get("description") or ""
            )
        if tag is GitHubAction.CREATE_PR:
            return self.create_pull_request(
                repo_name, require_arg(args, "branch", tag), args.get("title") or ""
            )
        if tag is GitHubAction.LIST_PRS:
            return self.list_pull_requests(repo_name)
        if tag is GitHubAction.GET_FILE:
            return self.get_file(repo_name, require_arg(args, "path", tag))
        if tag is GitHubAction.UPDATE_FILE:
            return self.update_file(
                repo_name,
                require_arg(args, "branch", tag),
                require_arg(args, "path", tag),
                require_arg(args, "content", tag),
                args.get("message") or "",
            )
        return self.delete_branch(repo_name, require_arg(args, "branch", tag))

    def list_repositories(self) -> OperationResult:
        lines = [
            f"• {r.name}\n  GitHub: {r.repo}\n  Default Branch: {r.default_branch}"
            for r in self.repositories
        ]
        return OperationResult(
            text="Configured Repositories:\n" + "\n\n".join(lines),
            data={"repositories": [r.model_dump() for r in self.repositories]},
        )

    def list_branches(self, repo_name: str) -> OperationResult:
        repository, prefix = self._split(repo_name)
        branches = self._request("GET", f"{prefix}/branches", params={"per_page": 50}) or []
        lines = [
            f"• {b['name']}{' (protected)' if b.get('protected') else ''}" for b in branches
        ]
        return OperationResult(
            text=f"Branches in {repository.repo}:\n" + "\n".join(lines),
            data={"branches": [b["name"] for b in branches]},
        )

    def create_branch(
        self, repo_name: str, branch_name: str, description: str = ""
    ) -> OperationResult:
        verdict = validate_branch_name(branch_name)
        if not verdict.valid:
            logger.info("Rejected branch name '%s': %s", branch_name, verdict.explanation)
            raise PolicyViolation(verdict)

        repository, prefix = self._split(repo_name)
        base = repository.default_branch
        base_ref = self._request("GET", f"{prefix}/git/ref/heads/{base}")
        try:
            sha = base_ref["object"]["sha"]
        except (KeyError, TypeError) as e:
            raise AdapterError(f"GitHub returned no SHA for base branch '{base}'") from e

        self._request(
            "POST",
            f"{prefix}/git/refs",
            json={"ref": f"refs/heads/{branch_name}", "sha": sha},
        )
        logger.info("Created branch %s from %s in %s", branch_name, base, repository.repo)

        text = f"Created branch '{branch_name}' from '{base}' in {repository.repo}"
        if description:
            text += f"\nDescription: {description}"
        text += f"\n\n{verdict.explanation}"
        return OperationResult(
            text=text,
            data={
                "branch": branch_name,
                "base": base,
                "sha": sha,
                "repo": repository.repo,
                "repo_name": repository.name,
            },
        )

    def create_pull_request(self, repo_name: str, head: str, title: str) -> OperationResult:
        repository, prefix = self._split(repo_name)
        base = repository.default_branch
        pr = self._request(
            "POST",
            f"{prefix}/pulls",
            json={
                "title": title,
                "head": head,
                "base": base,
                "body": build_pr_body(title, head, base),
            },
        )
        number = pr.get("number")
        url = pr.get("html_url", "")
        logger.info("Created PR #%s in %s: %s", number, repository.repo, url)
        return OperationResult(
            text=f"Created PR #{number}: {url}\n{head} → {base}\n\n{PR_GUIDELINES}",
            data={"number": number, "url": url, "head": head, "base": base, "title": title},
        )

    def list_pull_requests(self, repo_name: str) -> OperationResult:
        repository, prefix = self._split(repo_name)
        prs = (
            self._request("GET", f"{prefix}/pulls", params={"state": "open", "per_page": 20})
            or []
        )
        lines = [
            f"• #{pr['number']}: {pr['title']}\n"
            f"  {pr['head']['ref']} → {pr['base']['ref']} ({pr['html_url']})"
            for pr in prs
        ]
        return OperationResult(
            text=f"Open Pull Requests in {repository.repo}:\n" + "\n\n".join(lines),
            data={"pull_requests": [pr["number"] for pr in prs]},
        )

    def get_file(self, repo_name: str, path: str) -> OperationResult:
        repository, prefix = self._split(repo_name)
        branch = repository.default_branch
        try:
            file_data = self._request("GET", f"{prefix}/contents/{path}", params={"ref": branch})
        except NotFound as e:
            raise NotFound(f"File not found: {path} in {repository.repo}:{branch}") from e
        if not isinstance(file_data, dict):
            raise AdapterError(f"{path} is not a file in {repository.repo}:{branch}")
        content = base64.b64decode(file_data.get("content", "")).decode("utf-8")
        return OperationResult(
            text=f"File: {path} ({branch})\n```\n{content}\n```",
            data={"path": path, "content": content, "sha": file_data.get("sha")},
        )

    def update_file(
        self, repo_name: str, branch: str, path: str, content: str, message: str = ""
    ) -> OperationResult:
        repository, prefix = self._split(repo_name)
        current = self._request("GET", f"{prefix}/contents/{path}", params={"ref": branch})
        if not isinstance(current, dict):
            raise AdapterError(f"{path} is not a file in {repository.repo}:{branch}")
        self._request(
            "PUT",
            f"{prefix}/contents/{path}",
            json={
                "message": message or f"Update {path}",
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "sha": current.get("sha"),
                "branch": branch,
            },
        )
        return OperationResult(
            text=f"Updated {path} in branch '{branch}' of {repository.repo}",
            data={"path": path, "branch": branch},
        )

    def delete_branch(self, repo_name: str, branch_name: str) -> OperationResult:
        repository, prefix = self._split(repo_name)
        self._request("DELETE", f"{prefix}/git/refs/heads/{branch_name}")
        logger.info("Deleted branch %s in %s", branch_name, repository.repo)
        return OperationResult(
            text=f"Deleted branch '{branch_name}' in {repository.repo}",
            data={"branch": branch_name, "repo": repository.repo},
        )
