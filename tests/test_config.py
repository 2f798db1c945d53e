import pytest

from indexing.config import ConfigError, build_settings, load_config


def test_defaults_from_site_url_only():
    s = build_settings({"site": {"url": "https://shop.example.com/"}})
    assert s.site_url == "https://shop.example.com"
    assert s.sitemap_url == "https://shop.example.com/sitemap.xml"
    assert s.gsc_site_url == "https://shop.example.com/"
    assert s.gsc_sitemap_url == "https://shop.example.com/sitemap.xml"
    assert s.provider == "bing"
    assert s.port == 8080
    assert s.heartbeat_cron == "15 8 * * *"
    assert s.heartbeat_timezone == "Europe/London"
    assert s.strict is False
    assert s.webhook_secret is None
    assert not s.has_google
    assert not s.has_primary_key


def test_site_url_is_required():
    with pytest.raises(ConfigError):
        build_settings({})


def test_env_overrides_yaml():
    cfg = {"site": {"url": "https://a.example"}, "bing": {"api_key": "from-yaml"}, "server": {"port": 9000}}
    env = {
        "SITE_URL": "https://b.example",
        "BING_API_KEY": "from-env",
        "PORT": "9100",
        "SHOPIFY_WEBHOOK_SECRET": "s3cret",
        "GOOGLE_CREDENTIALS_JSON": '{"client_email": "x"}',
        "PROVIDERS_STRICT": "true",
        "LOG_LEVEL": "debug",
    }
    s = build_settings(cfg, env)
    assert s.site_url == "https://b.example"
    assert s.bing_api_key == "from-env"
    assert s.port == 9100
    assert s.webhook_secret == "s3cret"
    assert s.has_google
    assert s.strict is True
    assert s.log_level == "DEBUG"


def test_empty_env_values_do_not_override():
    s = build_settings({"site": {"url": "https://a.example"}, "bing": {"api_key": "k"}}, {"BING_API_KEY": ""})
    assert s.bing_api_key == "k"


def test_indexnow_provider_selection():
    s = build_settings({"site": {"url": "https://a.example"}, "submit": {"provider": "IndexNow"}, "indexnow": {"key": "abc"}})
    assert s.provider == "indexnow"
    assert s.has_primary_key


@pytest.mark.parametrize(
    "cfg",
    [
        {"site": {"url": "https://a.example"}, "submit": {"provider": "yahoo"}},
        {"site": {"url": "https://a.example"}, "server": {"port": "eighty"}},
        {"site": {"url": "https://a.example"}, "heartbeat": {"cron": "every day"}},
        {"site": {"url": "https://a.example"}, "heartbeat": {"cron": "99 8 * * *"}},
        {"site": {"url": "https://a.example"}, "heartbeat": {"timezone": "Mars/Olympus"}},
    ],
)
def test_invalid_values_raise(cfg):
    with pytest.raises(ConfigError):
        build_settings(cfg)


def test_settings_are_frozen():
    s = build_settings({"site": {"url": "https://a.example"}})
    with pytest.raises(Exception):
        s.port = 1


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "site:\n  url: https://shop.example.com\n"
        "heartbeat:\n  enabled: false\n  timezone: UTC\n"
        "google:\n  service_account_file: /tmp/sa.json\n"
    )
    s = load_config(path, env={})
    assert s.site_url == "https://shop.example.com"
    assert s.heartbeat_enabled is False
    assert s.heartbeat_timezone == "UTC"
    assert s.google_service_account_file == "/tmp/sa.json"


def test_load_config_missing_file_uses_env(tmp_path):
    s = load_config(tmp_path / "nope.yaml", env={"SITE_URL": "https://env.example"})
    assert s.site_url == "https://env.example"


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(path, env={})
