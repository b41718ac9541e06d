"""Shared fixtures for pwahint tests."""

import asyncio

import pytest

from pwahint.fetcher import FetchResult
from pwahint.rules.framework import LintResult, RuleContext
from pwahint.scanner import ElementEvent, HtmlElement, parse_html


class FakeFetcher:
    """ContentFetcher returning canned status codes or raising canned errors.

    ``responses`` maps URL to a status code (int or None) or an exception
    instance. Unknown URLs answer 200.
    """

    def __init__(self, responses=None, delay: float = 0.0):
        self.responses = dict(responses or {})
        self.delay = delay
        self.requested: list[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.requested.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self.responses.get(url, 200)
        if isinstance(response, BaseException):
            raise response
        return FetchResult(url=url, status_code=response)


@pytest.fixture
def fetcher():
    """Fake fetcher answering 200 for every URL."""
    return FakeFetcher()


@pytest.fixture
def lint_result():
    return LintResult()


@pytest.fixture
def make_context(lint_result, fetcher):
    """Build a RuleContext bound to the shared result and fake fetcher."""
    def _make(rule_name: str = "manifest-exists", **kwargs):
        return RuleContext(rule_name, lint_result, kwargs.pop("fetcher", fetcher), **kwargs)
    return _make


@pytest.fixture
def element_event():
    """Build the ElementEvent for the first element of some markup."""
    def _make(markup: str, resource: str = "https://example.com/page.html") -> ElementEvent:
        tag = parse_html(markup).find(True)
        return ElementEvent(element=HtmlElement(tag), resource=resource)
    return _make
