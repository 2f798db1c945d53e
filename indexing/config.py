"""Settings: config.yaml plus environment overrides, frozen once at startup."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml
from apscheduler.triggers.cron import CronTrigger

PROVIDERS = ("bing", "indexnow")
DEFAULT_PORT = 8080
DEFAULT_CRON = "15 8 * * *"
DEFAULT_TIMEZONE = "Europe/London"

# env var -> (section, key) in config.yaml
ENV_KEYS = {
    "SITE_URL": ("site", "url"),
    "SITEMAP_URL": ("site", "sitemap"),
    "SHOPIFY_WEBHOOK_SECRET": ("shopify", "webhook_secret"),
    "SUBMIT_PROVIDER": ("submit", "provider"),
    "INDEXNOW_KEY": ("indexnow", "key"),
    "INDEXNOW_KEY_LOCATION": ("indexnow", "key_location"),
    "INDEXNOW_ENDPOINT": ("indexnow", "endpoint"),
    "BING_API_KEY": ("bing", "api_key"),
    "GOOGLE_CREDENTIALS_JSON": ("google", "credentials_json"),
    "GOOGLE_SERVICE_ACCOUNT_FILE": ("google", "service_account_file"),
    "GSC_SITE_URL": ("google", "site_url"),
    "GSC_SITEMAP_URL": ("google", "sitemap_url"),
    "PROVIDERS_STRICT": ("providers", "strict"),
    "HEARTBEAT_CRON": ("heartbeat", "cron"),
    "HEARTBEAT_TIMEZONE": ("heartbeat", "timezone"),
    "HEARTBEAT_ENABLED": ("heartbeat", "enabled"),
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    site_url: str
    sitemap_url: str
    webhook_secret: str | None = None
    provider: str = "bing"
    indexnow_key: str | None = None
    indexnow_key_location: str | None = None
    indexnow_endpoint: str | None = None
    bing_api_key: str | None = None
    google_credentials_json: str | None = None
    google_service_account_file: str | None = None
    gsc_site_url: str = ""
    gsc_sitemap_url: str = ""
    strict: bool = False
    heartbeat_enabled: bool = True
    heartbeat_cron: str = DEFAULT_CRON
    heartbeat_timezone: str = DEFAULT_TIMEZONE
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def has_google(self) -> bool:
        return bool(self.google_credentials_json or self.google_service_account_file)

    @property
    def has_primary_key(self) -> bool:
        if self.provider == "indexnow":
            return bool(self.indexnow_key)
        return bool(self.bing_api_key)


def _flag(value, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _str(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _apply_env(cfg: dict, env: Mapping[str, str]) -> dict:
    merged = {section: dict(values or {}) for section, values in cfg.items() if isinstance(values, dict)}
    for name, (section, key) in ENV_KEYS.items():
        if env.get(name):
            merged.setdefault(section, {})[key] = env[name]
    if env.get("LOG_LEVEL"):
        merged["log_level"] = env["LOG_LEVEL"]
    elif "log_level" in cfg:
        merged["log_level"] = cfg["log_level"]
    return merged


def build_settings(cfg: dict | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from a parsed config.yaml mapping and an environment."""
    cfg = _apply_env(cfg or {}, env if env is not None else {})

    site = cfg.get("site", {})
    site_url = _str(site.get("url"))
    if not site_url:
        raise ConfigError("site.url (SITE_URL) is required")
    site_url = site_url.rstrip("/")
    sitemap_url = _str(site.get("sitemap")) or f"{site_url}/sitemap.xml"

    provider = (_str(cfg.get("submit", {}).get("provider")) or "bing").lower()
    if provider not in PROVIDERS:
        raise ConfigError(f"submit.provider must be one of {', '.join(PROVIDERS)}, got {provider!r}")

    server = cfg.get("server", {})
    try:
        port = int(server.get("port") or DEFAULT_PORT)
    except (TypeError, ValueError):
        raise ConfigError(f"server.port must be an integer, got {server.get('port')!r}") from None

    heartbeat = cfg.get("heartbeat", {})
    cron = _str(heartbeat.get("cron")) or DEFAULT_CRON
    tz = _str(heartbeat.get("timezone")) or DEFAULT_TIMEZONE
    if len(cron.split()) != 5:
        raise ConfigError(f"heartbeat.cron must have 5 fields, got {cron!r}")
    try:
        CronTrigger.from_crontab(cron, timezone=tz)
    except (ValueError, KeyError) as e:
        # unknown zones raise ZoneInfoNotFoundError / UnknownTimeZoneError, both KeyErrors
        raise ConfigError(f"invalid heartbeat schedule {cron!r} ({tz}): {e}") from None

    indexnow = cfg.get("indexnow", {})
    google = cfg.get("google", {})
    return Settings(
        site_url=site_url,
        sitemap_url=sitemap_url,
        webhook_secret=_str(cfg.get("shopify", {}).get("webhook_secret")),
        provider=provider,
        indexnow_key=_str(indexnow.get("key")),
        indexnow_key_location=_str(indexnow.get("key_location")),
        indexnow_endpoint=_str(indexnow.get("endpoint")),
        bing_api_key=_str(cfg.get("bing", {}).get("api_key")),
        google_credentials_json=_str(google.get("credentials_json")),
        google_service_account_file=_str(google.get("service_account_file")),
        gsc_site_url=_str(google.get("site_url")) or f"{site_url}/",
        gsc_sitemap_url=_str(google.get("sitemap_url")) or sitemap_url,
        strict=_flag(cfg.get("providers", {}).get("strict")),
        heartbeat_enabled=_flag(heartbeat.get("enabled"), default=True),
        heartbeat_cron=cron,
        heartbeat_timezone=tz,
        host=_str(server.get("host")) or "0.0.0.0",
        port=port,
        log_level=(_str(cfg.get("log_level")) or "INFO").upper(),
    )


def load_config(path: Path | str | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Read config.yaml (if present) and overlay the process environment."""
    cfg = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            try:
                cfg = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: {e}") from e
        if not isinstance(cfg, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
    return build_settings(cfg, os.environ if env is None else env)
