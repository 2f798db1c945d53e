"""Provider submitters: one ``submit(urls)`` per indexing service.

Every submitter returns the engines' result dict::

    {"ok": bool, "status": int, "error": str | None, "skipped": bool}

A missing credential is a skip (``ok`` True, ``skipped`` True) unless the
settings are strict, in which case it is a failure. Transport errors are
turned into failures so callers only ever look at ``ok``.
"""

import logging
from typing import Protocol, Sequence

import requests
from googleapiclient.errors import HttpError
from google.auth.exceptions import GoogleAuthError

from engines import bing, google_sc, indexnow
from indexing.config import Settings

log = logging.getLogger(__name__)


class Submitter(Protocol):
    name: str

    def submit(self, urls: Sequence[str]) -> dict: ...


def _result(ok: bool, status: int = 0, error: str | None = None, skipped: bool = False) -> dict:
    return {"ok": ok, "status": status, "error": error, "skipped": skipped}


def _missing(name: str, what: str, strict: bool) -> dict:
    if strict:
        return _result(False, error=f"{what} not configured")
    log.warning("%s missing; skipping %s submit.", what, name)
    return _result(True, skipped=True)


def _from_engine(result: dict) -> dict:
    return _result(result["ok"], result["status"], result.get("error"))


class IndexNowSubmitter:
    name = "IndexNow"

    def __init__(self, settings: Settings):
        self.settings = settings

    def submit(self, urls: Sequence[str]) -> dict:
        s = self.settings
        if not s.indexnow_key:
            return _missing(self.name, "INDEXNOW_KEY", s.strict)
        try:
            result = indexnow.submit_urls(
                s.indexnow_key,
                s.site_url,
                list(urls),
                key_location=s.indexnow_key_location,
                endpoint=s.indexnow_endpoint or indexnow.ENDPOINT,
            )
        except requests.RequestException as e:
            return _result(False, error=f"IndexNow request failed: {e}")
        if result["ok"]:
            log.info("IndexNow submit OK (%d URLs, HTTP %d)", len(urls), result["status"])
        return _from_engine(result)


class BingSubmitter:
    name = "Bing"

    def __init__(self, settings: Settings):
        self.settings = settings

    def submit(self, urls: Sequence[str]) -> dict:
        s = self.settings
        if not s.bing_api_key:
            return _missing(self.name, "BING_API_KEY", s.strict)
        try:
            result = bing.submit_urls(s.bing_api_key, f"{s.site_url}/", list(urls))
        except requests.RequestException as e:
            return _result(False, error=f"Bing request failed: {e}")
        if result["ok"]:
            log.info("Bing submit OK (%d URLs, HTTP %d)", len(urls), result["status"])
        return _from_engine(result)


class SearchConsoleSubmitter:
    """Re-signals the registered sitemap; the URL list itself is not sent."""

    name = "Google Search Console"

    def __init__(self, settings: Settings):
        self.settings = settings

    def submit(self, urls: Sequence[str] = ()) -> dict:
        s = self.settings
        if not s.has_google:
            return _missing(self.name, "GOOGLE_CREDENTIALS_JSON", s.strict)
        try:
            info = google_sc.load_service_account_info(s.google_credentials_json, s.google_service_account_file)
            google_sc.submit_sitemap(info, s.gsc_site_url, s.gsc_sitemap_url)
        except HttpError as e:
            return _result(False, e.resp.status, f"GSC sitemap submit {e.resp.status}: {e}")
        except (GoogleAuthError, ValueError, OSError) as e:
            return _result(False, error=f"GSC auth failed: {e}")
        log.info("GSC sitemap submitted OK (%s)", s.gsc_sitemap_url)
        return _result(True, 200)


def build_primary(settings: Settings) -> Submitter:
    if settings.provider == "indexnow":
        return IndexNowSubmitter(settings)
    return BingSubmitter(settings)


def build_secondary(settings: Settings) -> Submitter:
    return SearchConsoleSubmitter(settings)
