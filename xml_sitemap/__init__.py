"""
XML Sitemap Generator - Source Package

Modules:
- config: Configuration loading and validation (xml-sitemap-config.ini)
- scanner: Directory traversal producing sitemap entries
- serializer: Sitemap protocol XML output
- cache: Local file cache with TTL
- headers: HTTP response headers
- generator: Request-level orchestration
- app: Flask application
- main: Command line entry point
"""

__version__ = "1.0.0"
