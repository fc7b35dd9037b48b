"""
SMOKE TESTS - Fast, Deterministic, No Network

Run: pytest tests/test_smoke.py

These tests verify the package imports and wires together without touching
anything outside a temporary directory.
"""

from tests.conftest import BASE_URL

# =============================================================================
# 1. IMPORTS
# =============================================================================

def test_core_modules_import():
    from xml_sitemap import app, cache, config, generator, headers, main, scanner, serializer, text  # noqa: F401


def test_dependencies_import():
    import flask  # noqa: F401
    from lxml import etree  # noqa: F401


def test_version():
    import xml_sitemap

    assert xml_sitemap.__version__

# =============================================================================
# 2. WIRING / INSTANTIATION
# =============================================================================

def test_scanner_from_config(site_config):
    from xml_sitemap.scanner import DirectoryScanner

    scanner = DirectoryScanner.from_config(site_config)
    assert scanner.filetypes == {"html"}
    assert scanner.priority == 0.5
    assert scanner.changefreq == "weekly"


def test_cache_from_config(site_config):
    from xml_sitemap.cache import LocalCache

    site_config.localcache = True
    site_config.localcache_file = "cache.xml"
    site_config.localcache_expire = 10

    cache = LocalCache.from_config(site_config)
    assert (cache.path, cache.ttl_seconds, cache.enabled) == ("cache.xml", 10, True)


def test_app_routes(site_config):
    from xml_sitemap.app import create_app

    rules = {rule.rule for rule in create_app(site_config).url_map.iter_rules()}
    assert {"/", "/sitemap.xml"} <= rules


def test_cli_parser():
    from xml_sitemap.main import build_parser

    args = build_parser().parse_args(["-c", "x.ini", "-o", "out.xml", "--base-url", BASE_URL])
    assert (args.config, args.output, args.base_url, args.serve) == ("x.ini", "out.xml", BASE_URL, False)

