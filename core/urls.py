"""URL rewriting between the inbound request and an upstream base URL."""

from urllib.parse import urlsplit

from core.exceptions import InvalidURL


def require_absolute_url(url: str) -> tuple[str, str]:
    """Return (scheme, netloc) of an absolute URL or raise InvalidURL."""
    try:
        parts = urlsplit(url)
        # Accessing port validates it (raises ValueError on garbage)
        parts.port
    except ValueError as e:
        raise InvalidURL(f"Invalid URL {url!r}: {e}") from e

    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise InvalidURL(f"Not an absolute URL: {url!r}")
    return parts.scheme, parts.netloc


def base_url_host(url: str) -> str:
    """Return the ``host[:port]`` part of a base URL, as sent in ``Host``."""
    _, netloc = require_absolute_url(url)
    # Drop any userinfo, it never belongs in a Host header
    return netloc.rpartition("@")[2]


def rewrite_url(original: str, target: str) -> str:
    """Move ``original`` onto the scheme, host and port of ``target``.

    The path and query of ``original`` are copied as-is, so percent-encoding,
    trailing slashes, parameter order and a bare ``?`` survive. Anything
    after ``#`` is dropped. Path and query on ``target`` are ignored.
    """
    require_absolute_url(original)
    scheme, netloc = require_absolute_url(target)
    return f"{scheme}://{netloc}{_path_and_query(original)}"


def _path_and_query(url: str) -> str:
    """Slice the raw path+query out of an absolute URL without re-encoding."""
    _, _, rest = url.partition("://")
    authority_end = len(rest)
    for delimiter in "/?#":
        index = rest.find(delimiter)
        if index != -1:
            authority_end = min(authority_end, index)

    tail = rest[authority_end:].split("#", 1)[0]
    if not tail.startswith("/"):
        tail = "/" + tail
    return tail
