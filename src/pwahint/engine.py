"""Linter: runs rules over documents.

A ``Linter`` owns the configuration, the rule classes and a content fetcher.
Every call to ``lint`` builds a fresh scanner and fresh rule instances, so no
rule state survives from one document to the next.
"""

import asyncio
import logging
from pathlib import Path
from urllib.parse import urlsplit

from .config import PwahintConfig
from .fetcher import ContentFetcher, FetchError, HttpContentFetcher
from .rules import DEFAULT_RULES
from .rules.framework import LintResult, Rule, RuleContext
from .scanner import Document, DocumentScanner

logger = logging.getLogger(__name__)


class Linter:
    """Main entry point for linting pages."""

    def __init__(self, config: PwahintConfig | None = None,
                 fetcher: ContentFetcher | None = None):
        self.config = config or PwahintConfig()
        self.fetcher = fetcher
        self.rules: list[type[Rule]] = []

    def add_rule(self, rule: type[Rule]) -> None:
        """Add a rule class."""
        self.rules.append(rule)

    def create_default_rules(self) -> None:
        """Register every built-in rule that is enabled in the configuration."""
        unknown = sorted(set(self.config.rules) - set(DEFAULT_RULES))
        if unknown:
            raise ValueError(f"Unknown rules in configuration: {', '.join(unknown)}")

        for name, rule in DEFAULT_RULES.items():
            if self.config.rule_config(name).enabled:
                self.add_rule(rule)
            else:
                logger.debug(f"Rule {name} disabled by configuration")

    async def lint(self, document: Document, result: LintResult | None = None) -> LintResult:
        """Evaluate one document and return the collected findings."""
        if result is None:
            result = LintResult()

        if self.fetcher is None:
            async with HttpContentFetcher(self.config.fetch) as fetcher:
                return await self._lint_with(document, fetcher, result)
        return await self._lint_with(document, self.fetcher, result)

    async def lint_many(self, documents: list[Document]) -> LintResult:
        """Evaluate documents one after the other into a single result."""
        result = LintResult()
        for document in documents:
            await self.lint(document, result)
        return result

    def lint_sync(self, document: Document) -> LintResult:
        return asyncio.run(self.lint(document))

    async def _lint_with(self, document: Document, fetcher: ContentFetcher,
                         result: LintResult) -> LintResult:
        scanner = DocumentScanner()

        logger.info(f"Linting {document.resource}")
        logger.debug(f"Running {len(self.rules)} rules")

        for rule_cls in self.rules:
            context = RuleContext(
                rule_cls.name, result, fetcher, self.config.rule_config(rule_cls.name)
            )
            rule = rule_cls(context)
            on_error = _error_reporter(context, document.resource)
            for channel, handler in rule.handlers().items():
                scanner.subscribe(channel, handler, on_error=on_error)

        visited = await scanner.scan(document)

        result.increment_counter("documents")
        result.increment_counter("elements", visited)
        logger.info(f"Lint of {document.resource} completed with status: {result.status.value}")
        return result


def _error_reporter(context: RuleContext, resource: str):
    def report_failure(channel: str, error: BaseException) -> None:
        context.report(resource, None, f"Rule execution failed: {error}")
    return report_failure


async def load_document(target: str, fetcher: ContentFetcher) -> Document:
    """Load a page from an http(s) URL, a file URL or a local path.

    Raises:
        FileNotFoundError: If a local path does not exist
        FetchError: If the page cannot be retrieved
    """
    scheme = urlsplit(target).scheme.lower()

    if scheme in ("http", "https", "file"):
        fetched = await fetcher.fetch(target)
        if fetched.status_code is not None and fetched.status_code >= 400:
            raise FetchError(f"{target} returned status code {fetched.status_code}")
        return Document(resource=fetched.url, html=fetched.text)

    path = Path(target).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"No such file: {target}")
    return Document(resource=path.as_uri(), html=path.read_text(encoding="utf-8"))
