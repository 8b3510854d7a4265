# tests/test_scrapers/test_work_scraper.py
import pytest
from datetime import datetime
from unittest.mock import patch

from ficsync.exceptions import WorkNotFoundError, ParseError
from ficsync.scrapers import WorkScraper


@pytest.fixture
def scraper():
    return WorkScraper(base_url="https://archiveofourown.org")


@pytest.fixture
def work(scraper, load_fixture):
    return scraper.parse(load_fixture("work_show.html"), "999")


def millis(year, month, day):
    return int(datetime(year, month, day).timestamp() * 1000)


def test_work_url_skips_adult_gate(scraper):
    assert scraper.get_url("999") == "https://archiveofourown.org/works/999?view_adult=true"


def test_extract_preface(work):
    assert work.id == "999"
    assert work.title == "Stars Over Harbor"
    assert work.author == "tidewriter"
    assert work.author_id == "tidewriter"
    assert work.summary == "<p>The <em>Enterprise</em> docks for repairs.</p>"


def test_extract_tags(work):
    assert work.rating == "Mature"
    assert work.warnings == ["Graphic Depictions Of Violence"]
    assert work.categories == ["M/M", "Gen"]
    assert work.fandoms == ["Star Trek", "Star Trek: The Original Series"]
    assert work.relationships == ["James T. Kirk/Spock"]
    assert work.characters == ["James T. Kirk", "Spock", "Leonard McCoy"]
    assert work.additional_tags == ["Hurt/Comfort"]


def test_extract_stats(work):
    assert work.language == "English"
    assert work.words == 45210
    assert work.current_chapters == 3
    assert work.total_chapters == "5"
    assert work.kudos == 2310
    assert work.bookmarks_count == 412
    assert work.hits == 50001
    assert not work.is_complete


def test_extract_dates(work):
    assert work.published_date == millis(2023, 6, 1)
    assert work.updated_date == millis(2024, 2, 20)


def test_extract_series(work):
    """Part number comes from the position text, not digits in the series name"""
    assert work.series_name == "The 5 Year Mission"
    assert work.series_part == 2


def test_missing_preface_is_not_found(scraper, load_fixture):
    with pytest.raises(WorkNotFoundError) as exc_info:
        scraper.parse(load_fixture("adult_gate.html"), "777")
    assert exc_info.value.message == "Work not found"
    assert not exc_info.value.retryable


def test_empty_document_is_parse_error(scraper):
    with pytest.raises(ParseError):
        scraper.parse("   ", "1")


def test_updated_falls_back_to_published(scraper):
    html = """
    <div class="preface group"><h2 class="title">One Shot</h2></div>
    <dl class="work meta"><dd class="published">2022-03-04</dd></dl>
    """
    work = scraper.parse(html, "5")
    assert work.updated_date == work.published_date == millis(2022, 3, 4)
    assert work.author == "Anonymous"
    assert work.series_name is None


@patch('ficsync.scrapers.base_scraper.now_millis', return_value=42)
def test_unparseable_date_uses_current_time(mock_now, scraper):
    html = """
    <div class="preface group"><h2 class="title">Odd Dates</h2></div>
    <dl class="work meta"><dd class="published">4 Mar 2022</dd></dl>
    """
    work = scraper.parse(html, "6")
    assert work.published_date == 42
    assert work.updated_date == 42
