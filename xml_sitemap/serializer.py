"""
1.0 Sitemap Serializer Module
Turns scanned entries into a sitemap protocol XML document.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from lxml import etree

from xml_sitemap.scanner import DEFERRED_LATEST, FixedTime, LastModified, ScanResult, SitemapEntry

logger = logging.getLogger(__name__)

SITEMAP_NS = {
    'sm': 'https://www.sitemaps.org/schemas/sitemap/0.9',
}

XSL_CONTENT_TYPE = "text/xsl"


def _tag(name: str) -> str:
    return f"{{{SITEMAP_NS['sm']}}}{name}"


def format_w3c_datetime(timestamp: float) -> str:
    """W3C datetime (ISO-8601, seconds precision, UTC), e.g. 2024-05-01T12:00:00+00:00."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat(timespec="seconds")


def format_priority(priority: float) -> str:
    return f"{priority:g}"


class SitemapSerializer:
    """
    2.0 SitemapSerializer Class
    Builds the <urlset> document. Output depends only on its inputs.
    """

    def __init__(self, base_url: str = "", xsl: Optional[str] = None):
        """
        2.1 Initialize the serializer.

        Args:
            base_url: Site base URL, prefixed to the stylesheet path.
            xsl: Stylesheet path relative to base_url; empty or None disables it.
        """
        self.base_url = base_url
        self.xsl = xsl or ""

    def serialize(self, entries: Iterable[SitemapEntry], latest_mod_time: float) -> bytes:
        """
        2.2 Serialize entries, resolving deferred lastmod values to latest_mod_time.

        Returns:
            The UTF-8 encoded document.
        """
        root = etree.Element(_tag("urlset"), nsmap={None: SITEMAP_NS['sm']})

        count = 0
        for entry in entries:
            url_element = etree.SubElement(root, _tag("url"))
            etree.SubElement(url_element, _tag("loc")).text = entry.location
            etree.SubElement(url_element, _tag("lastmod")).text = self._resolve_lastmod(
                entry.last_modified, latest_mod_time
            )
            if entry.change_frequency:
                etree.SubElement(url_element, _tag("changefreq")).text = entry.change_frequency
            if entry.priority is not None and 0 < entry.priority <= 1:
                etree.SubElement(url_element, _tag("priority")).text = format_priority(entry.priority)
            count += 1

        if self.xsl:
            stylesheet = etree.ProcessingInstruction(
                "xml-stylesheet", f'type="{XSL_CONTENT_TYPE}" href="{self.base_url}{self.xsl}"'
            )
            root.addprevious(stylesheet)

        document = etree.tostring(
            etree.ElementTree(root), xml_declaration=True, encoding="UTF-8", pretty_print=True
        )
        logger.debug(f"Serialized {count} URL entries ({len(document)} bytes)")
        return document

    def serialize_result(self, result: ScanResult) -> bytes:
        return self.serialize(result.entries, result.latest_mod_time)

    @staticmethod
    def _resolve_lastmod(last_modified: LastModified, latest_mod_time: float) -> str:
        if last_modified is DEFERRED_LATEST:
            return format_w3c_datetime(latest_mod_time)
        if isinstance(last_modified, FixedTime):
            return format_w3c_datetime(last_modified.timestamp)
        raise TypeError(f"Unsupported lastmod value: {last_modified!r}")
