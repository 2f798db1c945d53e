"""Map Shopify webhook topics and payloads to public storefront URLs."""

DEFAULT_BLOG = "news"

# topic prefix -> storefront path segment
RESOURCE_PATHS = {
    "products/": "products",
    "collections/": "collections",
}


def _handle(record) -> str | None:
    if not isinstance(record, dict):
        return None
    handle = record.get("handle")
    if not isinstance(handle, str) or not handle:
        return None
    return handle


def resolve(host: str, topic: str, payload) -> str | None:
    """Canonical URL for the resource a webhook is about, or None.

    Deletions are never resolved: Shopify usually omits the handle on delete,
    and the page is gone anyway.
    """
    host = host.rstrip("/")
    if topic.endswith("delete"):
        return None

    handle = _handle(payload)
    if not handle:
        return None

    for prefix, path in RESOURCE_PATHS.items():
        if topic.startswith(prefix):
            return f"{host}/{path}/{handle}"

    if topic.startswith("articles/"):
        blog = _handle(payload.get("blog")) or DEFAULT_BLOG
        return f"{host}/blogs/{blog}/{handle}"

    return None


def anchor_urls(host: str) -> list[str]:
    host = host.rstrip("/")
    return [f"{host}/", f"{host}/collections/all"]


def build_batch(host: str, resolved: str | None) -> list[str]:
    """Resolved URL first, then the home page and the all-products listing."""
    urls = ([resolved] if resolved else []) + anchor_urls(host)
    return list(dict.fromkeys(urls))


def wants_sitemap_resubmit(topic: str) -> bool:
    """New content of any kind, or any change to a collection."""
    return topic.endswith("create") or topic.startswith("collections/")
