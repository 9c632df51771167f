"""
Screening of model-suggested shell commands against dangerous patterns.

The rule set is an ordered tuple of immutable ``PatternRule`` values. A
command is checked rule by rule and the first rule that matches decides the
verdict, so the reported reason is deterministic for any input. Screening is
a pure computation: it never logs, never raises and never touches the
process environment.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class MatchKind(Enum):
    """How a rule's pattern is compared against a command."""

    SUBSTRING = "substring"
    PREFIX = "prefix"


@dataclass(frozen=True)
class ScreeningOptions:
    """Normalization applied to both patterns and commands before matching."""

    case_sensitive: bool = True
    collapse_whitespace: bool = False

    def normalize(self, text: str) -> str:
        if self.collapse_whitespace:
            text = " ".join(text.split())
        if not self.case_sensitive:
            text = text.lower()
        return text


DEFAULT_OPTIONS = ScreeningOptions()


@dataclass(frozen=True)
class PatternRule:
    """A single dangerous pattern and the explanation shown when it matches."""

    pattern: str
    reason: str
    kind: MatchKind = MatchKind.SUBSTRING

    def matches(self, command: str, options: ScreeningOptions = DEFAULT_OPTIONS) -> bool:
        pattern = options.normalize(self.pattern)
        text = options.normalize(command)
        if not pattern:
            return False
        if self.kind is MatchKind.PREFIX:
            return text.lstrip().startswith(pattern)
        return pattern in text


@dataclass(frozen=True)
class Verdict:
    """Outcome of screening one command: allowed, or blocked with a reason."""

    allowed: bool
    reason: Optional[str] = None
    rule: Optional[PatternRule] = None

    @property
    def blocked(self) -> bool:
        return not self.allowed

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def block(cls, reason: str, rule: Optional[PatternRule] = None) -> "Verdict":
        return cls(allowed=False, reason=reason, rule=rule)


DEFAULT_RULES: Tuple[PatternRule, ...] = (
    PatternRule("rm -rf", "recursive forced deletion"),
    PatternRule("mkfs", "filesystem formatting"),
    PatternRule("dd", "raw disk copy"),
    PatternRule("> /dev/", "redirection into a device file"),
    PatternRule("chmod -R", "recursive permission change"),
    PatternRule(":(){ :|:& };:", "fork bomb"),
)

EMPTY_COMMAND_REASON = "empty command: nothing to execute"
MALFORMED_COMMAND_REASON = "malformed command: expected text"


def build_rules(
    extra_substrings: Iterable[str] = (),
    extra_prefixes: Iterable[str] = (),
) -> Tuple[PatternRule, ...]:
    """Return the default rules followed by user-configured additions."""
    extra = [
        PatternRule(pattern, "user-configured blocked pattern")
        for pattern in extra_substrings
        if pattern
    ]
    extra += [
        PatternRule(prefix, "user-configured blocked command prefix", MatchKind.PREFIX)
        for prefix in extra_prefixes
        if prefix
    ]
    return DEFAULT_RULES + tuple(extra)


def describe(rule: PatternRule) -> str:
    """Human-readable reason for a blocked verdict, naming the pattern."""
    return f"matches '{rule.pattern}' ({rule.reason})"


def screen_command(
    command: object,
    rules: Tuple[PatternRule, ...] = DEFAULT_RULES,
    options: ScreeningOptions = DEFAULT_OPTIONS,
) -> Verdict:
    """
    Decide whether a candidate command may be run or shown.

    Args:
        command: The candidate shell command.
        rules: Ordered rule set; the first matching rule wins.
        options: Normalization applied before matching.

    Returns:
        ``Verdict.allow()`` when no rule matches, otherwise a blocked verdict
        carrying the triggering rule. Empty or non-text input is blocked.
    """
    if not isinstance(command, str):
        return Verdict.block(MALFORMED_COMMAND_REASON)
    if not command.strip():
        return Verdict.block(EMPTY_COMMAND_REASON)

    for rule in rules:
        if rule.matches(command, options):
            return Verdict.block(describe(rule), rule)
    return Verdict.allow()


class SafetyScreener:
    """Binds a rule set and normalization options for repeated screening."""

    def __init__(
        self,
        rules: Tuple[PatternRule, ...] = DEFAULT_RULES,
        options: ScreeningOptions = DEFAULT_OPTIONS,
    ):
        self.rules = tuple(rules)
        self.options = options

    def screen(self, command: object) -> Verdict:
        return screen_command(command, self.rules, self.options)
