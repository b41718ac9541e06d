"""URL helpers shared by rules."""

from urllib.parse import urljoin, urlsplit


def has_scheme(url: str) -> bool:
    """True when ``url`` carries an explicit scheme such as ``https:``."""
    return bool(urlsplit(url).scheme)


def resolve_manifest_url(href: str, resource: str) -> str:
    """Absolute URL of a manifest referenced from ``resource``.

    Examples:
        >>> resolve_manifest_url("/app.manifest", "https://example.com/page.html")
        'https://example.com/app.manifest'
        >>> resolve_manifest_url("https://cdn.example.com/m.json", "https://example.com/")
        'https://cdn.example.com/m.json'
    """
    if has_scheme(href):
        return href
    return urljoin(resource, href)
