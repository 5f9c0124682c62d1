"""
Tests for the base envelope extractors and language detection.
"""
from requests.structures import CaseInsensitiveDict

from analyzers.page_info import (
    detect_language,
    detect_technologies,
    extract_headings,
    extract_links,
    extract_media,
    extract_meta,
    extract_social_meta,
    resolve_language,
    summarize_headers,
    word_count,
)
from config import MAX_EXTERNAL_LINKS_LISTED, MAX_INTERNAL_LINKS_LISTED
from loader.parser import Document

PAGE = """
<html>
<head>
  <title>  Bakery in Lyon  </title>
  <meta name="description" content="Fresh bread every morning.">
  <meta name="keywords" content="bread, bakery">
  <meta name="robots" content="index, follow">
  <link rel="canonical" href="https://example.com/">
  <meta property="og:title" content="Bakery">
  <meta name="twitter:card" content="summary">
  <script src="https://code.jquery.com/jquery-3.7.1.min.js"></script>
  <link rel="stylesheet" href="/static/bootstrap.min.css">
</head>
<body>
  <h1>Welcome</h1><h2>Bread</h2><h2>Cakes</h2>
  <img src="a.png"><img src="b.png"><video></video><iframe></iframe>
  <a href="/about" title="About us">About</a>
  <a href="https://blog.example.com/post">Blog</a>
  <a href="https://other.org/">Partner</a>
  <a href="mailto:hi@example.com">Mail</a>
  <a href="#top">Top</a>
</body>
</html>
"""


class TestExtractMeta:

    def test_fields(self):
        meta = extract_meta(Document(PAGE))
        assert meta == {
            "title": "Bakery in Lyon",
            "meta_description": "Fresh bread every morning.",
            "meta_keywords": "bread, bakery",
            "canonical": "https://example.com/",
            "robots": "index, follow",
        }

    def test_missing_fields_are_none(self):
        meta = extract_meta(Document("<html><head><title></title></head></html>"))
        assert meta["title"] is None
        assert meta["canonical"] is None


class TestStructure:

    def test_headings(self):
        headings = extract_headings(Document(PAGE))
        assert headings["h1"] == ["Welcome"]
        assert headings["h2"] == ["Bread", "Cakes"]
        assert headings["h6"] == []

    def test_media(self):
        assert extract_media(Document(PAGE)) == {"images": 2, "videos": 1, "audios": 0, "iframes": 1}

    def test_social_meta(self):
        social = extract_social_meta(Document(PAGE))
        assert social["og_title"] == "Bakery"
        assert social["og_image"] is None
        assert social["twitter_card"] == "summary"


class TestLinks:

    def test_internal_and_external(self):
        links = extract_links(Document(PAGE), "https://example.com/")
        assert links["internal"] == 2
        assert links["external"] == 1
        assert links["internal_list"][0] == {"url": "https://example.com/about", "text": "About", "title": "About us"}
        assert links["external_list"][0]["url"] == "https://other.org/"

    def test_lists_are_truncated(self):
        anchors = "".join(f'<a href="/p{i}">p</a>' for i in range(60))
        anchors += "".join(f'<a href="https://site{i}.org/">s</a>' for i in range(30))
        links = extract_links(Document(f"<body>{anchors}</body>"), "https://example.com/")
        assert links["internal"] == 60
        assert links["external"] == 30
        assert len(links["internal_list"]) == MAX_INTERNAL_LINKS_LISTED
        assert len(links["external_list"]) == MAX_EXTERNAL_LINKS_LISTED


class TestTechnologies:

    def test_rules_and_server_header(self):
        headers = CaseInsensitiveDict({"Server": "nginx"})
        assert detect_technologies(Document(PAGE), headers) == ["jQuery", "Bootstrap", "nginx"]

    def test_nothing_detected(self):
        assert detect_technologies(Document("<p>x</p>"), CaseInsensitiveDict()) == []


class TestHeadersSummary:

    def test_defaults(self):
        summary = summarize_headers(CaseInsensitiveDict())
        assert summary["server"] == "Not set"
        assert summary["content_encoding"] == "None"
        assert summary["hsts"] == "Disabled"
        assert summary["csp"] == "Disabled"

    def test_present_headers(self):
        summary = summarize_headers(CaseInsensitiveDict({
            "Content-Type": "text/html",
            "Content-Encoding": "gzip",
            "Strict-Transport-Security": "max-age=1",
        }))
        assert summary["content_type"] == "text/html"
        assert summary["content_encoding"] == "gzip"
        assert summary["hsts"] == "Enabled"


class TestLanguage:

    def test_html_lang_wins(self):
        assert detect_language(Document('<html lang="fr-FR"><body>the and of</body></html>')) == "fr"

    def test_content_language_meta(self):
        html = '<html><head><meta http-equiv="Content-Language" content="es"></head><body></body></html>'
        assert detect_language(Document(html)) == "es"

    def test_stop_word_vote(self):
        html = "<html><body><p>le chat et les chiens du quartier des amis une maison</p></body></html>"
        assert detect_language(Document(html)) == "fr"

    def test_no_signal_falls_back(self):
        assert detect_language(Document("<html><body><p>xyz qwv</p></body></html>")) == "en"

    def test_resolve_auto(self):
        lang = resolve_language(Document('<html lang="es"></html>'), "auto")
        assert lang == {"detected": "es", "requested": "auto", "name": "Spanish"}

    def test_resolve_explicit(self):
        lang = resolve_language(Document('<html lang="es"></html>'), "it")
        assert lang["detected"] == "it"
        assert lang["name"] == "Italian"


def test_word_count():
    assert word_count(Document("<html><body><p>one two</p><p>three</p></body></html>")) == 3
