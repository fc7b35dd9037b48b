"""
Exception types raised by the sitemap generator.
"""


class SitemapError(Exception):
    """Base class for all sitemap generation errors."""


class ConfigError(SitemapError):
    """The configuration file is missing, unreadable or invalid."""


class ScanError(SitemapError):
    """A directory that has to be traversed cannot be read."""
