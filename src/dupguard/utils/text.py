"""Deterministic text and URL normalization used for matching.

These helpers are shared by identifier extraction and the record models,
so they live outside ``dupguard.extract`` to keep imports acyclic.
"""

import re
from urllib.parse import parse_qsl, urlencode, urlsplit

__all__ = [
    "TRACKING_PARAMS",
    "normalize_title",
    "normalize_url",
    "extract_host",
]

# Query parameters that never change the identity of a page
TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_content",
        "utm_term",
        "ref",
        "referer",
        "referrer",
        "source",
        "fbclid",
        "gclid",
        "msclkid",
        "twclid",
        "_ga",
        "mc_cid",
        "mc_eid",
    }
)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Normalize a title for comparison.

    Lowercases, removes punctuation and collapses whitespace.

    Parameters
    ----------
    title : str
        Raw title.

    Returns
    -------
    str
        Normalized title (empty string for empty input).
    """
    if not title:
        return ""
    text = title.casefold()
    text = _NON_WORD_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def normalize_url(url: str) -> str:
    """Normalize a URL for equality matching.

    Steps, in order:

    1. Drop tracking query parameters (``utm_*``, ``fbclid``, ...).
    2. Lowercase the host and strip a leading ``www.``.
    3. Trim a single trailing slash from a non-root path.

    The query is rebuilt before the path is touched, so removing every
    parameter never leaves a bare ``?`` behind.

    Parameters
    ----------
    url : str
        URL to normalize.

    Returns
    -------
    str
        Normalized URL. URLs without a scheme or host are only lowercased.
    """
    url = url.strip()
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        port = parts.port
    except ValueError:
        return url.lower()

    if not parts.scheme or not host:
        return url.lower()

    query_pairs = [
        (name, value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
        if name not in TRACKING_PARAMS
    ]
    query = urlencode(query_pairs)

    if host.startswith("www."):
        host = host[4:]
    netloc = f"{host}:{port}" if port is not None else host

    path = parts.path or "/"
    if path.endswith("/") and len(path) > 1:
        path = path[:-1]

    normalized = f"{parts.scheme}://{netloc}{path}"
    if query:
        normalized += f"?{query}"
    if parts.fragment:
        normalized += f"#{parts.fragment}"
    return normalized


def extract_host(url: str) -> str:
    """Return the host of *url*, or *url* itself if it has none."""
    try:
        host = urlsplit(url.strip()).hostname
    except ValueError:
        return url
    return host or url
