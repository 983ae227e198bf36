"""
URL canonicalization and internal-domain matching.

Canonical form: absolute http(s) URL, lower-cased scheme and host, no
fragment, no query string, no trailing slash. The canonical string is the
identity key of a crawled page.
"""

from urllib.parse import urljoin, urlparse, urlunparse

from sitegraph.core.exceptions import InvalidUrl, UnresolvableDomain

ALLOWED_SCHEMES = ("http", "https")


def normalize_url(url: str, base: str | None = None) -> str:
    """Return the canonical form of ``url``, resolved against ``base``.

    Raises:
        InvalidUrl: if the result is not a parsable http(s) URL with a host.
    """
    if not url or not url.strip():
        raise InvalidUrl(url)

    try:
        absolute = urljoin(base, url.strip()) if base else url.strip()
        parsed = urlparse(absolute)
        # Accessing .port validates the netloc
        parsed.port
    except ValueError as e:
        raise InvalidUrl(url, f"Invalid URL {url!r}: {e}") from e

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidUrl(url)
    if not parsed.hostname:
        raise InvalidUrl(url)

    netloc = parsed.netloc.lower()
    path = parsed.path.rstrip("/")

    return urlunparse((scheme, netloc, path, "", "", ""))


def validate_start_url(url: str) -> str:
    """Canonical form of a crawl start URL.

    Raises:
        UnresolvableDomain: an http(s) URL that names no host.
        InvalidUrl: any other unusable URL.
    """
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        parsed = None
    if parsed is not None and parsed.scheme.lower() in ALLOWED_SCHEMES and not parsed.hostname:
        raise UnresolvableDomain(url)
    return normalize_url(url)


def strip_www(hostname: str) -> str:
    hostname = hostname.lower()
    if hostname.startswith("www."):
        return hostname[4:]
    return hostname


def get_domain(url: str) -> str:
    """Registered domain of ``url`` without a leading ``www.``."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        raise UnresolvableDomain(url)
    return strip_www(hostname)


def is_internal(domain: str, url: str) -> bool:
    """Check if ``url`` belongs to the site rooted at ``domain``.

    Hosts match after stripping a leading ``www.``; subdomains of the
    registered domain count as internal.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False

    base_domain = strip_www(domain)
    host = strip_www(hostname)
    return host == base_domain or host.endswith(f".{base_domain}")


def truncate_url(url: str, max_length: int = 40) -> str:
    if len(url) <= max_length:
        return url
    return url[: max_length - 3] + "..."
