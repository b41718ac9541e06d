"""Core rule framework for pwahint.

Rules are per-document observers. The linter creates one rule instance for
every document it evaluates, subscribes the instance's handlers to scanner
events and collects whatever the rule reports through its ``RuleContext``.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from ..config import RuleConfig, RuleSeverity
from ..fetcher import ContentFetcher, FetchResult

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[None] | None]


class LintStatus(str, Enum):
    """Overall outcome of a lint run."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class Finding:
    """A single problem reported by a rule."""
    rule: str
    message: str
    resource: str | None = None
    element: str | None = None
    severity: RuleSeverity = RuleSeverity.ERROR

    def __str__(self) -> str:
        location = ""
        if self.resource:
            location += f" in {self.resource}"
        if self.element:
            location += f" at {self.element}"
        return f"[{self.severity.value.upper()}] {self.rule}: {self.message}{location}"


@dataclass
class LintResult:
    """Findings and counters collected over a lint run."""
    status: LintStatus = LintStatus.PASS
    findings: list[Finding] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = pass/warn, 1 = fail."""
        return 0 if self.status != LintStatus.FAIL else 1

    def add_finding(self, finding: Finding) -> None:
        self.findings.append(finding)

        # fail > warn > pass
        if finding.severity == RuleSeverity.ERROR:
            self.status = LintStatus.FAIL
        elif self.status == LintStatus.PASS:
            self.status = LintStatus.WARN

    def increment_counter(self, name: str, value: int = 1) -> None:
        self.counters[name] = self.counters.get(name, 0) + value

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "counters": self.counters,
            "findings": [
                {
                    "rule": finding.rule,
                    "severity": finding.severity.value,
                    "message": finding.message,
                    "resource": finding.resource,
                    "element": finding.element,
                }
                for finding in self.findings
            ]
        }


@dataclass(frozen=True)
class RuleMeta:
    """Static rule metadata consumed by the rule registry."""
    category: str
    description: str
    recommended: bool = False
    fixable: str | None = None
    schema: tuple[Any, ...] = ()


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a guarded fetch: either a ``FetchResult`` or an error reason."""
    result: FetchResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class RuleContext:
    """What a rule may do besides observing events: report and fetch."""

    def __init__(self, rule_name: str, result: LintResult, fetcher: ContentFetcher,
                 rule_config: RuleConfig | None = None):
        self.rule_name = rule_name
        self.result = result
        self.fetcher = fetcher
        self.rule_config = rule_config or RuleConfig()

    def report(self, resource: str | None, element: Any, message: str) -> None:
        """Record a finding for the current rule."""
        location = describe_element(element) if element is not None else None
        self.result.add_finding(Finding(
            rule=self.rule_name,
            message=message,
            resource=resource,
            element=location,
            severity=RuleSeverity(self.rule_config.severity),
        ))

    async def fetch_content(self, url: str) -> FetchResult:
        return await self.fetcher.fetch(url)

    async def try_fetch(self, url: str) -> FetchOutcome:
        """Fetch ``url`` without letting any failure escape.

        Cancellation of the surrounding evaluation is folded into a failed
        outcome too, so an aborted document never crashes the host.
        """
        try:
            return FetchOutcome(result=await self.fetch_content(url))
        except (Exception, asyncio.CancelledError) as e:
            logger.debug(f"Fetching {url} failed: {e!r}")
            return FetchOutcome(error=str(e) or type(e).__name__)


def describe_element(element: Any) -> str:
    """Short human-readable location for an element."""
    describe = getattr(element, "describe", None)
    if callable(describe):
        return describe()
    return str(element)


class Rule(ABC):
    """Base class for lint rules.

    Subclasses set ``name`` and ``meta`` and map scanner channels such as
    ``element::link`` or ``traverse::end`` to bound handlers.
    """

    name: ClassVar[str]
    meta: ClassVar[RuleMeta]

    def __init__(self, context: RuleContext):
        self.context = context

    @abstractmethod
    def handlers(self) -> dict[str, Handler]:
        """Channel name to handler mapping for this rule instance."""
        pass
