"""
URL to `site:` query normalization.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

# Any leading "scheme:" plus its slashes; a port ("host:8080") is not a scheme.
_SCHEME_PREFIX = re.compile(r"^[a-z][a-z0-9+.\-]*:(?!\d)/*", re.IGNORECASE)
_WEB_SCHEMES = frozenset({"http", "https"})


def to_site_query(raw_url: str) -> str:
    """
    Return `hostname + path` for `raw_url` without scheme or trailing slash.

    Never raises. Inputs that do not parse as an absolute URL fall back to
    stripping any leading `scheme:` with its slashes, and one trailing
    slash, from the raw text.
    """

    text = (raw_url or "").strip()
    try:
        parsed = urlsplit(text)
        hostname = parsed.hostname if parsed.scheme else None
        if not hostname and parsed.scheme.lower() in _WEB_SCHEMES:
            # "https:/a.test/x" and "http:a.test/x" still name a host.
            rest = text[len(parsed.scheme) + 1:].lstrip("/\\")
            parsed = urlsplit("//" + rest)
            hostname = parsed.hostname
    except ValueError:
        hostname = None

    if hostname:
        return _strip_trailing_slash(hostname + parsed.path)
    return _strip_trailing_slash(_SCHEME_PREFIX.sub("", text))


def containment_match(site_query: str, result_link: str) -> bool:
    """
    Whether a search result link belongs to the normalized target.

    True when the normalized link starts with the target, or the target
    starts with the link's host segment.
    """

    target = site_query.lower()
    link = to_site_query(result_link).lower()
    if not target or not link:
        return False
    host_segment = link.split("/", 1)[0]
    return link.startswith(target) or (bool(host_segment) and target.startswith(host_segment))


def any_containment_match(site_query: str, result_links: Iterable[str]) -> bool:
    return any(containment_match(site_query, link) for link in result_links if link)


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value
