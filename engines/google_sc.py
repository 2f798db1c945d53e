"""Google Search Console API — sitemap resubmission."""

import json

SCOPES = ["https://www.googleapis.com/auth/webmasters"]


def load_service_account_info(credentials_json: str | None = None, sa_file: str | None = None) -> dict:
    """Parse service-account JSON from an inline string or a key file.

    Hosting dashboards often store the private key with literal ``\\n`` sequences;
    those are turned back into real newlines before the key is used.
    """
    if credentials_json:
        info = json.loads(credentials_json)
    elif sa_file:
        with open(sa_file) as f:
            info = json.load(f)
    else:
        raise ValueError("no service-account credentials configured")
    info["private_key"] = (info.get("private_key") or "").replace("\\n", "\n")
    return info


def _build_service(info: dict, api: str = "webmasters", version: str = "v3"):
    from google.auth.transport.requests import Request
    from google.oauth2 import service_account
    from googleapiclient.discovery import build

    creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    # Authorize up front so a bad key fails here rather than inside the API call.
    creds.refresh(Request())
    return build(api, version, credentials=creds, cache_discovery=False)


def submit_sitemap(info: dict, site_url: str, sitemap_url: str) -> dict:
    service = _build_service(info)
    service.sitemaps().submit(siteUrl=site_url, feedpath=sitemap_url).execute()
    return {"ok": True, "sitemap": sitemap_url}
