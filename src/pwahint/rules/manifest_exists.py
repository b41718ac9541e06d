"""Check that a single web app manifest is declared and that it is reachable.

https://w3c.github.io/manifest/#obtaining
"""

import logging

from ..scanner import ElementEvent
from .framework import FetchOutcome, Handler, Rule, RuleContext, RuleMeta
from .urls import resolve_manifest_url

logger = logging.getLogger(__name__)


class ManifestValidator(Rule):
    """Per-document observer for ``<link rel="manifest">`` declarations.

    The only state is ``manifest_declared``. It flips to True on the first
    manifest link, whatever that link's ``href`` turns out to be, and never
    flips back for the lifetime of the instance. Duplicate and missing
    declarations are judged from this flag; malformed or unreachable
    manifests are judged per element.
    """

    name = "manifest-exists"
    meta = RuleMeta(
        category="pwa",
        description="Provide a web app manifest file",
        recommended=True,
        fixable="code",
        schema=(),
    )

    def __init__(self, context: RuleContext):
        super().__init__(context)
        self.manifest_declared = False

    def handlers(self) -> dict[str, Handler]:
        return {
            "element::link": self.on_element,
            "traverse::end": self.on_traverse_end,
        }

    async def on_element(self, event: ElementEvent) -> None:
        element = event.element
        resource = event.resource

        # Everything up to the fetch must stay free of awaits: the duplicate
        # check and the state write have to follow event arrival order.
        if element.get_attribute("rel") != "manifest":
            return

        if self.manifest_declared:
            self.context.report(resource, element, "Web app manifest already specified")
            return

        self.manifest_declared = True

        href = element.get_attribute("href")
        if not href:
            self.context.report(resource, element, "Web app manifest specified with invalid 'href'")
            return

        # An href that cannot even be resolved is a failed request.
        try:
            manifest_url = resolve_manifest_url(href, resource)
        except ValueError as e:
            outcome = FetchOutcome(error=str(e))
        else:
            logger.debug(f"Checking web app manifest {manifest_url}")
            outcome = await self.context.try_fetch(manifest_url)

        if not outcome.ok:
            logger.debug(f"Failed to fetch the web app manifest file: {outcome.error}")
            self.context.report(resource, element, "Web app manifest file request failed")
            return

        # Local files have no status code.
        status_code = outcome.result.status_code
        if status_code is not None and status_code != 200:
            self.context.report(
                resource,
                element,
                f"Web app manifest file could not be fetched (status code: {status_code})",
            )

    def on_traverse_end(self, event=None) -> None:
        if not self.manifest_declared:
            self.context.report(None, None, "Web app manifest not specified")
