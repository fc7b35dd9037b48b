"""
SERIALIZER TESTS - sitemap XML envelope and lastmod resolution.
"""

from lxml import etree

from tests.conftest import BASE_URL, T1, T3
from xml_sitemap.scanner import DEFERRED_LATEST, DirectoryScanner, FixedTime, SitemapEntry
from xml_sitemap.serializer import SITEMAP_NS, SitemapSerializer, format_priority, format_w3c_datetime


def parse(document: bytes):
    return etree.fromstring(document)


def url_elements(document: bytes):
    return parse(document).findall("sm:url", SITEMAP_NS)


def text_of(url_element, name):
    child = url_element.find(f"sm:{name}", SITEMAP_NS)
    return None if child is None else child.text


# =============================================================================
# 1. ENVELOPE
# =============================================================================

def test_declaration_and_namespace():
    document = SitemapSerializer(BASE_URL).serialize([], 0)

    assert document.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
    root = parse(document)
    assert root.tag == "{https://www.sitemaps.org/schemas/sitemap/0.9}urlset"
    assert len(root) == 0


def test_stylesheet_instruction():
    document = SitemapSerializer(BASE_URL, xsl="xml-sitemap.xsl").serialize([], 0)

    assert b'<?xml-stylesheet type="text/xsl" href="https://example.com/xml-sitemap.xsl"?>' in document
    assert document.index(b"xml-stylesheet") < document.index(b"<urlset")


def test_no_stylesheet_when_xsl_empty():
    assert b"xml-stylesheet" not in SitemapSerializer(BASE_URL, xsl="").serialize([], 0)
    assert b"xml-stylesheet" not in SitemapSerializer(BASE_URL, xsl=None).serialize([], 0)


# =============================================================================
# 2. URL ELEMENTS
# =============================================================================

def test_url_elements_in_order():
    entries = [
        SitemapEntry(BASE_URL + "b.html", FixedTime(T1), "daily", 0.8),
        SitemapEntry(BASE_URL + "a.html", FixedTime(T3)),
    ]
    urls = url_elements(SitemapSerializer(BASE_URL).serialize(entries, T3))

    assert [text_of(u, "loc") for u in urls] == [BASE_URL + "b.html", BASE_URL + "a.html"]
    assert text_of(urls[0], "lastmod") == format_w3c_datetime(T1)
    assert text_of(urls[0], "changefreq") == "daily"
    assert text_of(urls[0], "priority") == "0.8"
    assert text_of(urls[1], "changefreq") is None
    assert text_of(urls[1], "priority") is None


def test_deferred_lastmod_resolves_to_latest():
    entries = [
        SitemapEntry(BASE_URL + "index.html", DEFERRED_LATEST),
        SitemapEntry(BASE_URL + "old.html", FixedTime(T1)),
    ]
    urls = url_elements(SitemapSerializer(BASE_URL).serialize(entries, T3))

    assert text_of(urls[0], "lastmod") == format_w3c_datetime(T3)
    assert text_of(urls[1], "lastmod") == format_w3c_datetime(T1)


def test_filename_resembling_a_placeholder_is_left_alone():
    loc = BASE_URL + "%24%7Blast_mod_date%7D.html"
    urls = url_elements(SitemapSerializer(BASE_URL).serialize([SitemapEntry(loc, FixedTime(T1))], T3))
    assert text_of(urls[0], "loc") == loc


def test_special_characters_are_escaped():
    loc = BASE_URL + "page.html?a=1&b=2"
    document = SitemapSerializer(BASE_URL).serialize([SitemapEntry(loc, FixedTime(T1))], T1)

    assert b"a=1&amp;b=2" in document
    assert text_of(url_elements(document)[0], "loc") == loc


def test_out_of_range_priority_is_not_written():
    entries = [SitemapEntry(BASE_URL + "a.html", FixedTime(T1), priority=2.0)]
    urls = url_elements(SitemapSerializer(BASE_URL).serialize(entries, T1))
    assert text_of(urls[0], "priority") is None


def test_serialization_is_deterministic():
    entries = [SitemapEntry(BASE_URL + "a.html", DEFERRED_LATEST, "weekly", 0.5)]
    serializer = SitemapSerializer(BASE_URL, xsl="s.xsl")
    assert serializer.serialize(entries, T3) == serializer.serialize(entries, T3)


# =============================================================================
# 3. SCAN + SERIALIZE
# =============================================================================

def test_sample_tree_document(site):
    result = DirectoryScanner(filetypes=["html"], changefreq="weekly", priority=0.5).scan(str(site), BASE_URL)
    urls = {text_of(u, "loc"): u for u in url_elements(SitemapSerializer(BASE_URL).serialize_result(result))}

    assert set(urls) == {BASE_URL + "a.html", BASE_URL + "sub/c.html"}
    assert text_of(urls[BASE_URL + "a.html"], "lastmod") == format_w3c_datetime(T1)
    assert text_of(urls[BASE_URL + "sub/c.html"], "lastmod") == format_w3c_datetime(T3)
    for url in urls.values():
        assert text_of(url, "changefreq") == "weekly"
        assert text_of(url, "priority") == "0.5"


def test_sample_tree_with_latest_replacement(site):
    scanner = DirectoryScanner(filetypes=["html"], replacelatestmod=["a.html"])
    result = scanner.scan(str(site), BASE_URL)
    urls = {text_of(u, "loc"): u for u in url_elements(SitemapSerializer(BASE_URL).serialize_result(result))}

    assert text_of(urls[BASE_URL + "a.html"], "lastmod") == format_w3c_datetime(T3)


# =============================================================================
# 4. FORMATTING
# =============================================================================

def test_w3c_datetime():
    assert format_w3c_datetime(0) == "1970-01-01T00:00:00+00:00"
    assert format_w3c_datetime(1_600_000_000.75) == "2020-09-13T12:26:40+00:00"


def test_priority_formatting():
    assert format_priority(0.5) == "0.5"
    assert format_priority(1.0) == "1"
    assert format_priority(0.25) == "0.25"
