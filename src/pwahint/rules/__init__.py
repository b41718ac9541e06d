"""Lint rules shipped with pwahint."""

from .framework import Finding, LintResult, LintStatus, Rule, RuleContext, RuleMeta
from .manifest_exists import ManifestValidator
from .urls import resolve_manifest_url

DEFAULT_RULES: dict[str, type[Rule]] = {
    ManifestValidator.name: ManifestValidator,
}

__all__ = [
    "DEFAULT_RULES",
    "Finding",
    "LintResult",
    "LintStatus",
    "ManifestValidator",
    "Rule",
    "RuleContext",
    "RuleMeta",
    "resolve_manifest_url",
]
