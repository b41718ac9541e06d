"""Document traversal and event dispatch.

The scanner parses a page, walks its elements in document order and notifies
subscribers on named channels:

- ``traverse::start`` once, before the first element
- ``element::<tag>`` for every element, e.g. ``element::link``
- ``traverse::end`` once, after every handler started for an earlier event
  has settled

Handlers may be plain functions or coroutine functions. Coroutines are turned
into tasks as soon as their event is dispatched, so their code up to the first
``await`` runs in event order.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

logger = logging.getLogger(__name__)

TRAVERSE_START = "traverse::start"
TRAVERSE_END = "traverse::end"

ErrorCallback = Callable[[str, BaseException], None]


def parse_html(markup: str, parser: str = "html.parser") -> BeautifulSoup:
    """Parse markup keeping every attribute value as its raw source string."""
    return BeautifulSoup(markup, parser, multi_valued_attributes=None)


@dataclass(frozen=True)
class Document:
    """A page to evaluate, identified by its base resource URL."""
    resource: str
    html: str


class HtmlElement:
    """Read-only view of a parsed element."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name

    def get_attribute(self, name: str) -> str | None:
        """Raw attribute value, or None when the attribute is absent.

        Values are never split or normalised, so ``rel=" manifest "`` stays
        exactly that.
        """
        return self._tag.get(name)

    def describe(self) -> str:
        attrs = "".join(
            f' {key}="{self.get_attribute(key)}"' for key in self._tag.attrs
        )
        return f"<{self.name}{attrs}>"

    def __repr__(self) -> str:
        return f"HtmlElement({self.describe()})"


@dataclass(frozen=True)
class ElementEvent:
    """One element found during traversal."""
    element: HtmlElement
    resource: str


@dataclass(frozen=True)
class TraverseEvent:
    resource: str


@dataclass
class _Subscription:
    handler: Callable[..., Any]
    on_error: ErrorCallback | None = None


class DocumentScanner:
    """Walks one document at a time and dispatches events to subscribers."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser
        self._subscriptions: dict[str, list[_Subscription]] = defaultdict(list)

    def subscribe(self, channel: str, handler: Callable[..., Any],
                  on_error: ErrorCallback | None = None) -> None:
        self._subscriptions[channel].append(_Subscription(handler, on_error))

    def clear(self) -> None:
        self._subscriptions.clear()

    async def scan(self, document: Document) -> int:
        """Traverse ``document`` and return the number of elements visited."""
        soup = parse_html(document.html, self.parser)
        pending: list[tuple[asyncio.Task, _Subscription, str]] = []

        self._dispatch(TRAVERSE_START, TraverseEvent(document.resource), pending)

        visited = 0
        for tag in soup.find_all(True):
            visited += 1
            event = ElementEvent(element=HtmlElement(tag), resource=document.resource)
            self._dispatch(f"element::{tag.name}", event, pending)

        logger.debug(f"Visited {visited} elements in {document.resource}, "
                     f"waiting for {len(pending)} pending handlers")
        await self._settle(pending)

        self._dispatch(TRAVERSE_END, TraverseEvent(document.resource), pending)
        await self._settle(pending)

        return visited

    def _dispatch(self, channel: str, event: Any,
                  pending: list[tuple[asyncio.Task, _Subscription, str]]) -> None:
        for subscription in self._subscriptions.get(channel, []):
            try:
                outcome = subscription.handler(event)
            except Exception as e:
                self._handle_error(channel, subscription, e)
                continue

            if inspect.isawaitable(outcome):
                pending.append((asyncio.ensure_future(outcome), subscription, channel))

    async def _settle(self, pending: list[tuple[asyncio.Task, _Subscription, str]]) -> None:
        """Completion barrier: wait until every pending handler has finished."""
        while pending:
            batch = list(pending)
            pending.clear()
            results = await asyncio.gather(
                *(task for task, _, _ in batch), return_exceptions=True
            )
            for (_, subscription, channel), outcome in zip(batch, results):
                if isinstance(outcome, BaseException):
                    self._handle_error(channel, subscription, outcome)

    def _handle_error(self, channel: str, subscription: _Subscription,
                      error: BaseException) -> None:
        logger.error(f"Handler for {channel} failed with error: {error}")
        if subscription.on_error is not None:
            subscription.on_error(channel, error)
