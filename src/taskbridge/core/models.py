"""Data types shared by adapters, workflows and the CLI."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Repository(BaseModel):
    """A configured GitHub repository.

    Accepts the camelCase ``defaultBranch`` key used in repos.json as well as
    the snake_case field name.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1)
    repo: str
    default_branch: str = Field(default="develop", alias="defaultBranch")

    @field_validator("repo")
    @classmethod
    def validate_repo(cls, v: str) -> str:
        """Require the ``owner/repository`` form."""
        v = v.strip()
        owner, _, name = v.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(f"repo must be in 'owner/repository' form, got '{v}'")
        return v

    @property
    def owner(self) -> str:
        return self.repo.split("/")[0]

    @property
    def repo_slug(self) -> str:
        return self.repo.split("/")[1]


class OperationResult(BaseModel):
    """Normalized success payload of one adapter call.

    Attributes:
        text: Human-readable summary for display
        data: Normalized fields (branch ref, PR number/url, card id/url, ...)
    """

    model_config = ConfigDict(frozen=True)

    text: str
    data: Dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
