"""Daily heartbeat: ping the providers whether or not any webhooks arrived."""

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from indexing.config import Settings
from indexing.providers import Submitter

log = logging.getLogger(__name__)

JOB_ID = "daily-heartbeat"


def heartbeat_urls(settings: Settings) -> list[str]:
    return [f"{settings.site_url}/", settings.sitemap_url]


def _call(submitter: Submitter, urls: list[str]) -> dict | None:
    try:
        result = submitter.submit(urls)
    except Exception:
        log.exception("Heartbeat: %s submit raised", submitter.name)
        return None
    if not result["ok"]:
        log.error("Heartbeat: %s submit failed: %s", submitter.name, result["error"])
    return result


def run_heartbeat(settings: Settings, primary: Submitter, secondary: Submitter) -> dict:
    """Submit home page + sitemap to the primary, resubmit the sitemap to the secondary.

    Never raises; returns ``{provider name: result or None}``.
    """
    urls = heartbeat_urls(settings)
    results = {
        primary.name: _call(primary, urls),
        secondary.name: _call(secondary, urls),
    }
    if all(r is not None and r["ok"] for r in results.values()):
        log.info("Daily health submit complete")
    return results


def build_scheduler(settings: Settings, primary: Submitter, secondary: Submitter) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        timezone=settings.heartbeat_timezone,
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 300},
    )
    scheduler.add_job(
        run_heartbeat,
        CronTrigger.from_crontab(settings.heartbeat_cron, timezone=settings.heartbeat_timezone),
        args=(settings, primary, secondary),
        id=JOB_ID,
        name="Daily indexing heartbeat",
        replace_existing=True,
    )
    return scheduler
