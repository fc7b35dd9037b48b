"""
1.0 Sitemap Generator
Ties configuration, local cache, scanner and serializer together.

Flow:
1. Resolve the base URL (config value, else the request's scheme + host)
2. Ask the local cache for a fresh document
3. On a miss (or with caching off): scan the tree and serialize it
4. Attach response headers
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from xml_sitemap.cache import LocalCache
from xml_sitemap.config import SitemapConfig
from xml_sitemap.exceptions import ConfigError
from xml_sitemap.headers import build_headers
from xml_sitemap.scanner import DirectoryScanner
from xml_sitemap.serializer import SitemapSerializer

logger = logging.getLogger(__name__)


@dataclass
class SitemapResponse:
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    cache_status: Optional[str] = None


def resolve_config(config: SitemapConfig, request_base_url: Optional[str] = None) -> SitemapConfig:
    """
    2.0 Fill in directory_url from the request when the config leaves it empty.

    Raises:
        ConfigError: neither the config nor the request provides a base URL.
    """
    if config.directory_url:
        return config
    if not request_base_url:
        raise ConfigError("'directory_url' is empty and no request URL is available to infer it from.")
    return config.with_base_url(request_base_url)


def build_document(config: SitemapConfig) -> bytes:
    """
    3.0 Scan config.directory and serialize the result.

    Raises:
        ScanError: the tree cannot be read.
    """
    scanner = DirectoryScanner.from_config(config)
    result = scanner.scan(config.directory, config.directory_url)
    serializer = SitemapSerializer(base_url=config.directory_url, xsl=config.xsl)
    return serializer.serialize_result(result)


def generate_sitemap(
    config: SitemapConfig,
    request_base_url: Optional[str] = None,
    clock: Callable[[], float] = time.time,
) -> SitemapResponse:
    """
    4.0 Produce the sitemap response for one request.

    Args:
        config: Loaded configuration.
        request_base_url: Scheme + host of the current request, e.g. "https://example.com/".
        clock: Current time source, shared by the cache TTL check and the Expires header.

    Returns:
        SitemapResponse with the document bytes and headers.

    Raises:
        ConfigError: no base URL can be determined.
        ScanError: the tree cannot be read on a cache miss.
    """
    config = resolve_config(config, request_base_url)

    cache = LocalCache.from_config(config, clock=clock)
    outcome = cache.get_or_build(lambda: build_document(config))

    headers = build_headers(config, cache_status=outcome.status, now=clock())
    return SitemapResponse(body=outcome.body, headers=headers, cache_status=outcome.status)
