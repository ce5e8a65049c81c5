# File: tests/test_link_extractor.py
from error_scout.crawler.link_extractor import extract_links

PAGE = "https://x.test/context:proj/sub/page"


def test_resolves_relative_links_in_document_order():
    html = '<a href="/o:proj/a">A</a><a href="b">B</a><a href="https://other.test/c">C</a><a href="/o:proj/a">A again</a>'
    assert extract_links(html, PAGE) == [
        "https://x.test/o:proj/a",
        "https://x.test/context:proj/sub/b",
        "https://other.test/c",
        "https://x.test/o:proj/a",
    ]


def test_drops_anchors_script_and_non_http_links():
    html = (
        '<a href="#top">top</a>'
        '<a href="/o:proj/a#section">frag</a>'
        '<a href="javascript:void(0)">js</a>'
        '<a href="mailto:info@x.test">mail</a>'
        '<a href="tel:+43">tel</a>'
        '<a href="   ">blank</a>'
        '<a>no href</a>'
        '<a href="/o:proj/keep">keep</a>'
    )
    assert extract_links(html, PAGE) == ["https://x.test/o:proj/keep"]


def test_respects_base_href():
    html = '<html><head><base href="https://x.test/archive/"></head><body><a href="objects/o:proj.1">x</a></body></html>'
    assert extract_links(html, PAGE) == ["https://x.test/archive/objects/o:proj.1"]
