"""IndexNow — instant URL submission to Bing, Yandex, Naver, Seznam."""

import requests
from urllib.parse import urlparse

ENDPOINT = "https://api.indexnow.org/indexnow"


def key_location_for(site_url: str, key: str) -> str:
    return f"{site_url.rstrip('/')}/{key}.txt"


def submit_urls(
    key: str,
    site_url: str,
    urls: list[str],
    key_location: str | None = None,
    endpoint: str = ENDPOINT,
) -> dict:
    """Submit URLs via IndexNow. Max 10,000 per batch.

    Any 2xx counts as accepted (200 = submitted, 202 = key pending validation).
    """
    host = urlparse(site_url).netloc
    resp = requests.post(
        endpoint,
        json={
            "host": host,
            "key": key,
            "keyLocation": key_location or key_location_for(site_url, key),
            "urlList": list(urls),
        },
        timeout=30,
    )
    ok = 200 <= resp.status_code < 300
    return {
        "status": resp.status_code,
        "ok": ok,
        "error": None if ok else f"IndexNow submit {resp.status_code}: {resp.text}",
    }
