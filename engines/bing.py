"""Bing Webmaster Tools API."""

import requests

BASE = "https://ssl.bing.com/webmaster/api.svc/json"
MAX_BATCH = 500


def _post_batch(api_key: str, site_url: str, urls: list[str]) -> dict:
    resp = requests.post(
        f"{BASE}/SubmitUrlbatch",
        params={"apikey": api_key},
        json={"siteUrl": site_url, "urlList": urls},
        timeout=30,
    )
    ok = 200 <= resp.status_code < 300
    return {
        "status": resp.status_code,
        "ok": ok,
        "error": None if ok else f"Bing submit {resp.status_code}: {resp.text}",
    }


def submit_urls(api_key: str, site_url: str, urls: list[str]) -> dict:
    """Submit URLs in batches of 500 (10,000/day). Stops at the first failed batch."""
    urls = list(urls)
    result = {"status": 0, "ok": True, "error": None}
    for start in range(0, max(len(urls), 1), MAX_BATCH):
        result = _post_batch(api_key, site_url, urls[start:start + MAX_BATCH])
        if not result["ok"]:
            break
    return result
