"""
1.0 Response Headers
HTTP headers sent with the sitemap document.
"""

import time
from email.utils import formatdate
from typing import Dict, Optional

from xml_sitemap.config import EXPIRE_TIME_PLACEHOLDER, SitemapConfig

CONTENT_TYPE = "application/xml"
CACHE_HEADER = "X-Cache"


def build_cache_control(template: str, expire_time: int) -> str:
    """Substitute the expire time into the Cache-Control template."""
    return template.replace(EXPIRE_TIME_PLACEHOLDER, str(expire_time))


def build_headers(
    config: SitemapConfig,
    cache_status: Optional[str] = None,
    now: Optional[float] = None,
) -> Dict[str, str]:
    """
    2.0 Build the response headers.

    Args:
        config: Loaded configuration (cache_control, expire_time, localcache).
        cache_status: "HIT" or "MISS" from the local cache, None when it is off.
        now: Current epoch seconds, defaults to time.time().

    Returns:
        Header name -> value, in the order they should be sent.
    """
    now = time.time() if now is None else now

    headers = {"Content-Type": CONTENT_TYPE}

    headers["Cache-Control"] = build_cache_control(config.cache_control, config.expire_time)

    # RFC 1123 date, e.g. "Sun, 06 Nov 1994 08:49:37 GMT"
    if config.expire_time > 0:
        headers["Expires"] = formatdate(now + config.expire_time, usegmt=True)

    if config.localcache and cache_status:
        headers[CACHE_HEADER] = f"{cache_status} from localhost"

    return headers
