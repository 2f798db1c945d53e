import pytest

from indexing.config import Settings
from indexing.signature import sign

SECRET = "shpss_test_secret"
HOST = "https://shop.example.com"


class FakeSubmitter:
    def __init__(self, name="Fake", result=None, exc=None):
        self.name = name
        self.result = result or {"ok": True, "status": 200, "error": None, "skipped": False}
        self.exc = exc
        self.calls = []

    def submit(self, urls):
        self.calls.append(list(urls))
        if self.exc is not None:
            raise self.exc
        return self.result


def failed(status=500, error="boom"):
    return {"ok": False, "status": status, "error": error, "skipped": False}


@pytest.fixture
def settings():
    return Settings(
        site_url=HOST,
        sitemap_url=f"{HOST}/sitemap.xml",
        webhook_secret=SECRET,
        bing_api_key="bing-key",
        gsc_site_url=f"{HOST}/",
        gsc_sitemap_url=f"{HOST}/sitemap.xml",
        heartbeat_enabled=False,
    )


@pytest.fixture
def primary():
    return FakeSubmitter("Primary")


@pytest.fixture
def secondary():
    return FakeSubmitter("Secondary")


@pytest.fixture
def signed():
    def _signed(body: bytes, secret: str = SECRET) -> str:
        return sign(secret, body)

    return _signed
