"""Webhook pipeline: verify, resolve, submit to the primary and (maybe) the sitemap provider."""

import enum
import json
import logging
from dataclasses import dataclass

from indexing.config import Settings
from indexing.providers import Submitter
from indexing.signature import verify
from indexing.urls import build_batch, resolve, wants_sitemap_resubmit

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    topic: str
    raw_body: bytes
    signature: str | None


class Outcome(enum.Enum):
    SUCCESS = (200, "OK")
    UNAUTHENTICATED = (401, "Invalid HMAC")
    ERROR = (500, "ERROR")

    @property
    def status(self) -> int:
        return self.value[0]

    @property
    def text(self) -> str:
        return self.value[1]


class SubmissionPipeline:
    def __init__(self, settings: Settings, primary: Submitter, secondary: Submitter):
        self.settings = settings
        self.primary = primary
        self.secondary = secondary

    def handle(self, event: ChangeEvent) -> Outcome:
        if not verify(self.settings.webhook_secret, event.raw_body, event.signature):
            log.warning("Invalid Shopify HMAC (topic=%r)", event.topic)
            return Outcome.UNAUTHENTICATED

        try:
            payload = json.loads(event.raw_body)
        except ValueError as e:
            log.error("Malformed webhook body (topic=%r): %s", event.topic, e)
            return Outcome.ERROR

        url = resolve(self.settings.site_url, event.topic, payload)
        urls = build_batch(self.settings.site_url, url)

        try:
            result = self.primary.submit(urls)
        except Exception:
            log.exception("%s submit raised (topic=%r)", self.primary.name, event.topic)
            return Outcome.ERROR
        if not result["ok"]:
            log.error("%s submit failed (topic=%r): %s", self.primary.name, event.topic, result["error"])
            return Outcome.ERROR

        if wants_sitemap_resubmit(event.topic):
            self._resubmit_sitemap(event.topic, urls)

        log.info("Webhook processed: topic=%s urls=%s", event.topic, urls)
        return Outcome.SUCCESS

    def _resubmit_sitemap(self, topic: str, urls: list[str]) -> None:
        try:
            result = self.secondary.submit(urls)
        except Exception as e:
            log.warning("%s submit warning (topic=%r): %s", self.secondary.name, topic, e)
            return
        if not result["ok"]:
            log.warning("%s submit warning (topic=%r): %s", self.secondary.name, topic, result["error"])
