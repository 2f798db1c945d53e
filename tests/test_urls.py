import pytest

from indexing.urls import anchor_urls, build_batch, resolve, wants_sitemap_resubmit

HOST = "https://shop.example.com"


@pytest.mark.parametrize(
    "topic, payload, expected",
    [
        ("products/create", {"handle": "widget"}, f"{HOST}/products/widget"),
        ("products/update", {"handle": "widget"}, f"{HOST}/products/widget"),
        ("products/delete", {"handle": "widget"}, None),
        ("collections/update", {"handle": "summer"}, f"{HOST}/collections/summer"),
        ("collections/delete", {"handle": "summer"}, None),
        ("articles/create", {"handle": "a", "blog": {"handle": "b"}}, f"{HOST}/blogs/b/a"),
        ("articles/create", {"handle": "a"}, f"{HOST}/blogs/news/a"),
        ("articles/update", {"handle": "a", "blog": {}}, f"{HOST}/blogs/news/a"),
        ("articles/update", {"handle": "a", "blog": "b"}, f"{HOST}/blogs/news/a"),
        ("articles/delete", {"handle": "a"}, None),
        ("unknown/create", {"handle": "x"}, None),
        ("orders/create", {"handle": "x"}, None),
    ],
)
def test_resolve(topic, payload, expected):
    assert resolve(HOST, topic, payload) == expected


@pytest.mark.parametrize("payload", [{}, {"handle": None}, {"handle": ""}, {"handle": 0}, {"handle": False}, None, [], "widget", 42])
def test_resolve_without_handle_is_none(payload):
    assert resolve(HOST, "products/update", payload) is None


def test_resolve_strips_trailing_slash_from_host():
    assert resolve(HOST + "/", "products/create", {"handle": "w"}) == f"{HOST}/products/w"


def test_batch_always_contains_anchor_pages():
    assert build_batch(HOST, None) == [f"{HOST}/", f"{HOST}/collections/all"]
    assert build_batch(HOST, f"{HOST}/products/w") == [
        f"{HOST}/products/w",
        f"{HOST}/",
        f"{HOST}/collections/all",
    ]


def test_batch_is_distinct():
    assert build_batch(HOST, f"{HOST}/collections/all") == anchor_urls(HOST)[::-1]


@pytest.mark.parametrize(
    "topic, expected",
    [
        ("products/create", True),
        ("articles/create", True),
        ("collections/update", True),
        ("collections/delete", True),
        ("products/update", False),
        ("products/delete", False),
        ("articles/update", False),
        ("", False),
    ],
)
def test_wants_sitemap_resubmit(topic, expected):
    assert wants_sitemap_resubmit(topic) is expected
