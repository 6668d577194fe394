import pytest
import requests

from apod_archive_dataset.data.records import ArchiveLinkEntry
from apod_archive_dataset.pipeline.config import PacingConfig
from apod_archive_dataset.scraping.archive_index import fetch_archive_links, parse_archive_links
from apod_archive_dataset.scraping.http import create_session, fetch_html, fetch_with_retries
from apod_archive_dataset.scraping.page_parser import parse_apod_page, parse_page_html
from apod_archive_dataset.utils.errors import FetchError

from conftest import ARCHIVE_PAGE, BASE_URL, EARLY_ARCHIVE_PAGE, FakeSession, apod_page

ARCHIVE_HTML = """
<html><body><b>
2025 October 24: <a href="ap251024.html">Newest Thing</a><br>
2025 October 23: <a href="ap251023.html"> Middle Thing </a><br>
<a href="archivepix.html">Archive</a>
<a href="ap2510.html">broken</a>
<a href="https://apod.nasa.gov/apod/ap251022.html">absolute</a>
<a name="anchor-without-href">nothing</a>
1995 June 16: <a href="ap950616.html">Neutron Star Earth</a><br>
</b></body></html>
"""


def test_parse_archive_links_keeps_document_order() -> None:
    links = parse_archive_links(ARCHIVE_HTML)
    assert links == [
        ArchiveLinkEntry("ap251024.html", "Newest Thing"),
        ArchiveLinkEntry("ap251023.html", "Middle Thing"),
        ArchiveLinkEntry("ap950616.html", "Neutron Star Earth"),
    ]


def test_fetch_archive_links(cfg) -> None:
    session = FakeSession({BASE_URL + "archivepixFull.html": ARCHIVE_HTML})
    links = fetch_archive_links(session, cfg)
    assert [l.identifier for l in links] == ["ap251024.html", "ap251023.html", "ap950616.html"]


def test_fetch_archive_links_error(cfg) -> None:
    session = FakeSession({BASE_URL + "archivepixFull.html": 503})
    with pytest.raises(FetchError) as exc:
        fetch_archive_links(session, cfg)
    assert exc.value.reason == "HTTP 503"


def test_fetch_html_failures() -> None:
    session = FakeSession({
        "http://x/timeout": requests.Timeout("read timed out"),
        "http://x/empty": "   ",
    })
    with pytest.raises(FetchError, match="read timed out"):
        fetch_html(session, "http://x/timeout")
    with pytest.raises(FetchError, match="Empty HTML"):
        fetch_html(session, "http://x/empty")
    with pytest.raises(FetchError, match="HTTP 404"):
        fetch_html(session, "http://x/missing")


def test_fetch_with_retries_linear_backoff(sleeps) -> None:
    url = "http://x/flaky"
    session = FakeSession({url: [500, requests.ConnectionError("reset"), "<p>ok</p>"]})
    pacing = PacingConfig(delay=0, timeout=1, retries=3, backoff=0.4)

    assert fetch_with_retries(session, url, pacing) == "<p>ok</p>"
    assert len(session.calls) == 3
    assert sleeps == [0.4, 0.8]


def test_fetch_with_retries_gives_up(sleeps) -> None:
    url = "http://x/down"
    session = FakeSession({url: 500})
    pacing = PacingConfig(delay=0, timeout=1, retries=3, backoff=1.0)

    with pytest.raises(FetchError):
        fetch_with_retries(session, url, pacing)
    assert len(session.calls) == 3
    assert sleeps == [1.0, 2.0]


def test_parse_image_page() -> None:
    html = apod_page(media='<a href="image/2510/big.jpg"><img src="image/2510/star.jpg"></a>')
    rec = parse_page_html(html, "ap251024.html", BASE_URL)

    assert rec.date == "2025-10-24"
    assert rec.title == "A Star"
    assert rec.explanation == "Stars shine."
    assert rec.media_type == "image"
    assert rec.url == rec.hdurl == "https://apod.nasa.gov/apod/image/2510/star.jpg"
    assert rec.copyright == "Jane Doe"


def test_parse_video_page() -> None:
    src = "https://www.youtube.com/embed/abc123?rel=0"
    html = apod_page(media=f'<iframe width="960" height="540" src="{src}"></iframe>')
    rec = parse_page_html(html, "ap950616.html", BASE_URL)

    assert rec.date == "1995-06-16"
    assert rec.media_type == "video"
    assert rec.url == rec.hdurl == src


def test_parse_unknown_media() -> None:
    html = apod_page(media='<iframe src="https://example.org/widget"></iframe>')
    rec = parse_page_html(html, "ap251024.html", BASE_URL)
    assert rec.media_type == "unknown"
    assert rec.url == ""
    assert rec.hdurl == ""


def test_parse_page_without_labels() -> None:
    html = "<html><body><p>Just some text.</p></body></html>"
    rec = parse_page_html(html, "ap000101.html", BASE_URL)

    assert rec.title == "Untitled"
    assert rec.explanation == ""
    assert rec.copyright == ""
    assert rec.media_type == "unknown"


def test_parse_apod_page_skips_failures(cfg, caplog) -> None:
    session = FakeSession({
        BASE_URL + "ap251024.html": apod_page(),
        BASE_URL + "ap251023.html": 500,
    })

    assert parse_apod_page(session, "ap251024.html", cfg) is not None
    with caplog.at_level("WARNING"):
        assert parse_apod_page(session, "ap251023.html", cfg) is None
    assert "ap251023.html" in caplog.text


def test_parse_archive_page_markup() -> None:
    rec = parse_page_html(ARCHIVE_PAGE, "ap251024.html", BASE_URL)

    assert rec.date == "2025-10-24"
    assert rec.title == "Galaxy Wars"
    assert rec.media_type == "image"
    assert rec.url == "https://apod.nasa.gov/apod/image/2510/GalaxyWars_1024.jpg"
    assert rec.copyright == "Jane Doe (Sky Lab)"
    # the paragraph after the explanation is an empty one closed by <center>;
    # the enricher recovers the text later
    assert rec.explanation == ""


def test_parse_early_archive_page_markup() -> None:
    rec = parse_page_html(EARLY_ARCHIVE_PAGE, "ap950616.html", BASE_URL)

    assert rec.date == "1995-06-16"
    assert rec.title == "Neutron Star Earth"
    assert rec.explanation == "What if Earth were\ncompressed to the size of a neutron star?"
    assert rec.url == "https://apod.nasa.gov/apod/image/neutron.gif"
    assert rec.copyright == ""


def test_parse_archive_index_with_unclosed_markup() -> None:
    html = (
        "<html><body><h1>Astronomy Picture of the Day Archive</h1><p>"
        "<b>\n2025 October 24:  <a href=\"ap251024.html\">Galaxy Wars</a><br>\n"
        "2025 October 23:  <a href=\"ap251023.html\">Comet Tails</a><br>\n"
        "<p><a href=\"lib/about_apod.html\">About APOD</a>"
    )
    links = parse_archive_links(html)
    assert [(l.identifier, l.label) for l in links] == [
        ("ap251024.html", "Galaxy Wars"),
        ("ap251023.html", "Comet Tails"),
    ]


def test_session_headers(cfg) -> None:
    session = create_session(cfg)
    assert session.headers["User-Agent"] == cfg.user_agent
    assert session.headers["Accept"] == "text/html,*/*"
    assert "Accept-Language" not in session.headers
