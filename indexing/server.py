"""HTTP surface: Shopify webhook receiver, health check, heartbeat scheduler lifecycle."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from indexing.config import Settings
from indexing.heartbeat import build_scheduler
from indexing.pipeline import ChangeEvent, SubmissionPipeline
from indexing.providers import Submitter, build_primary, build_secondary

log = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhooks/shopify"


def warn_missing_credentials(settings: Settings, primary: Submitter) -> None:
    if not settings.webhook_secret:
        log.warning("SHOPIFY_WEBHOOK_SECRET is not set; Shopify webhooks will fail verification.")
    if not settings.has_primary_key:
        log.warning("%s key is not set; %s submissions will be skipped until you add it.", primary.name, primary.name)
    if not settings.has_google:
        log.warning("GOOGLE_CREDENTIALS_JSON is not set; GSC sitemap submits will be skipped.")


def create_app(
    settings: Settings,
    primary: Submitter | None = None,
    secondary: Submitter | None = None,
    start_scheduler: bool | None = None,
) -> FastAPI:
    primary = primary or build_primary(settings)
    secondary = secondary or build_secondary(settings)
    pipeline = SubmissionPipeline(settings, primary, secondary)
    if start_scheduler is None:
        start_scheduler = settings.heartbeat_enabled

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        warn_missing_credentials(settings, primary)
        scheduler = None
        if start_scheduler:
            scheduler = build_scheduler(settings, primary, secondary)
            scheduler.start()
            log.info("Heartbeat scheduled: %s (%s)", settings.heartbeat_cron, settings.heartbeat_timezone)
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(title="Shopify indexing agent", lifespan=lifespan)
    app.state.pipeline = pipeline

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return f"Indexing agent ({primary.name}) is running"

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz():
        return "ok"

    @app.post(WEBHOOK_PATH, response_class=PlainTextResponse)
    async def shopify_webhook(request: Request):
        event = ChangeEvent(
            topic=request.headers.get("x-shopify-topic", ""),
            raw_body=await request.body(),
            signature=request.headers.get("x-shopify-hmac-sha256"),
        )
        try:
            outcome = await run_in_threadpool(pipeline.handle, event)
        except Exception:
            log.exception("Webhook error (topic=%r)", event.topic)
            return PlainTextResponse("ERROR", status_code=500)
        return PlainTextResponse(outcome.text, status_code=outcome.status)

    return app
