"""Branch naming policy.

Company rules are evaluated in a fixed order and the first failing rule wins.
``validate_branch_name`` never raises; it always returns a verdict.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

BRANCH_PREFIXES: Tuple[str, ...] = (
    "feature/",
    "fix/",
    "enhancement/",
    "hotfix/",
    "bugfix/",
    "feat/",
    "chore/",
    "docs/",
    "style/",
    "refactor/",
    "test/",
)
MAX_BRANCH_LENGTH = 50
ALLOWED_BRANCH_CHARS = re.compile(r"[A-Za-z0-9/_-]+")

COMPLIANCE_MESSAGE = "Branch name follows company Git best practices"


@dataclass(frozen=True)
class PolicyRule:
    """A named predicate over a candidate plus its explanation.

    Attributes:
        name: Short identifier ("prefix", "length", "charset")
        predicate: Returns True when the candidate passes
        explain: Builds the violation message for a failing candidate
        guidance: Company rules text shown alongside a violation
    """

    name: str
    predicate: Callable[[str], bool]
    explain: Callable[[str], str]
    guidance: str

    def check(self, candidate: str) -> bool:
        return self.predicate(candidate)


@dataclass(frozen=True)
class ValidationVerdict:
    """Result of validating one candidate branch name."""

    valid: bool
    explanation: str
    failed_rule: Optional[PolicyRule] = None

    @property
    def guidance(self) -> str:
        return self.failed_rule.guidance if self.failed_rule else ""


PREFIX_RULE = PolicyRule(
    name="prefix",
    predicate=lambda name: name.startswith(BRANCH_PREFIXES),
    explain=lambda _name: f"Branch name must start with one of: {', '.join(BRANCH_PREFIXES)}",
    guidance=(
        "Git Best Practice Rules:\n"
        "• Use descriptive prefixes (feature/, fix/, enhancement/, etc.)\n"
        f"• Keep names under {MAX_BRANCH_LENGTH} characters\n"
        "• Use lowercase with hyphens or underscores\n"
        "• Example: feature/user-authentication or fix/login-bug"
    ),
)

LENGTH_RULE = PolicyRule(
    name="length",
    predicate=lambda name: len(name) <= MAX_BRANCH_LENGTH,
    explain=lambda name: f"Branch name too long ({len(name)}/{MAX_BRANCH_LENGTH} chars)",
    guidance=(
        "Git Best Practice Rules:\n"
        f"• Keep branch names under {MAX_BRANCH_LENGTH} characters\n"
        "• Use concise but descriptive names"
    ),
)

CHARSET_RULE = PolicyRule(
    name="charset",
    predicate=lambda name: ALLOWED_BRANCH_CHARS.fullmatch(name) is not None,
    explain=lambda _name: (
        "Branch name contains invalid characters "
        "(allowed: letters, numbers, hyphens, underscores, forward slashes)"
    ),
    guidance=(
        "Git Best Practice Rules:\n"
        "• Use only letters, numbers, hyphens, underscores, and forward slashes\n"
        "• No spaces or special characters"
    ),
)

BRANCH_RULES: Tuple[PolicyRule, ...] = (PREFIX_RULE, LENGTH_RULE, CHARSET_RULE)


def validate_branch_name(
    candidate: str, rules: Tuple[PolicyRule, ...] = BRANCH_RULES
) -> ValidationVerdict:
    """Validate a proposed branch name against company rules.

    Args:
        candidate: The proposed branch name
        rules: Ordered rule set, evaluated until the first failure

    Returns:
        ValidationVerdict; ``failed_rule`` is set only when invalid
    """
    for rule in rules:
        if not rule.check(candidate):
            return ValidationVerdict(
                valid=False,
                explanation=rule.explain(candidate),
                failed_rule=rule,
            )
    return ValidationVerdict(valid=True, explanation=COMPLIANCE_MESSAGE)
