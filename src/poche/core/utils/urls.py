"""Image source filtering and relative URL resolution for rendered links and images"""

import logging
from typing import Optional
from urllib.parse import urlsplit


logger = logging.getLogger(__name__)

TRACKING_PIXEL_PREFIX = "data:image/gif;base64,R0lGOD"
DEFAULT_PORTS = {"http": 80, "https": 443}


def is_valid_image_url(src: Optional[str]) -> bool:
    """False for empty, '#', or 1x1 tracking-pixel GIF data URIs; True otherwise."""
    if not src or not src.strip() or src == "#" or src.startswith(TRACKING_PIXEL_PREFIX):
        return False
    return True


def _origin(base_url: str) -> Optional[tuple[str, str, str]]:
    """Return (scheme, host, path) of an absolute base URL, or None if it is malformed."""
    try:
        parts = urlsplit(base_url)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    host = f"[{parts.hostname}]" if ":" in parts.hostname else parts.hostname
    if port is not None and port != DEFAULT_PORTS.get(parts.scheme):
        host = f"{host}:{port}"
    return parts.scheme, host, parts.path or "/"


def resolve_url(href: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """Resolve href to an absolute URL against base_url.

    Absolute http(s) URLs pass through unchanged and protocol-relative URLs
    get https. file:// URLs, relative URLs without a base, and a malformed
    base all yield None. Relative paths resolve against the directory of the
    base path (up to and including its last '/').
    """
    if not href:
        return None
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("file://"):
        return None
    if href.startswith("//"):
        return f"https:{href}"
    if not base_url:
        return None

    origin = _origin(base_url)
    if origin is None:
        logger.debug("Cannot resolve %r against malformed base %r", href, base_url)
        return None
    scheme, host, path = origin
    if href.startswith("/"):
        return f"{scheme}://{host}{href}"
    directory = path[:path.rfind("/") + 1]
    return f"{scheme}://{host}{directory}{href}"
