"""Tests for record extraction from rendered result pages."""

from __future__ import annotations

from datetime import datetime

from pages import EMPTY_PAGE, result_item, results_page

from yle_feed.content import absolutize_link, extract_records
from yle_feed.dates import EARLIEST, SITE_TIMEZONE, current_pub_date

_NOW = datetime(2025, 11, 2, 8, 0, tzinfo=SITE_TIMEZONE)


def test_relative_link_is_prefixed_with_origin() -> None:
    assert absolutize_link("/a/123") == "https://yle.fi/a/123"


def test_absolute_link_passes_through() -> None:
    url = "https://areena.yle.fi/1-123"
    assert absolutize_link(url) == url


def test_extracts_record_fields() -> None:
    html = results_page(
        result_item(href="/a/74-1", title="  Kunnallisvaalit  ", details="23.9.2025 | Uutiset | Politiikka")
    )

    records = extract_records(html, now=_NOW)

    assert len(records) == 1
    record = records[0]
    assert record.title == "Kunnallisvaalit"
    assert record.link == "https://yle.fi/a/74-1"
    assert record.guid == record.link
    assert record.raw_date_text == "23.9.2025"
    assert record.published_at == datetime(2025, 9, 23, tzinfo=SITE_TIMEZONE)
    assert record.display_date == "Tue, 23 Sep 2025 00:00:00 +0300"
    assert record.has_date


def test_partial_date_is_placed_in_current_year() -> None:
    html = results_page(result_item(details="5.10. | Uutiset"))

    records = extract_records(html, now=_NOW)

    assert records[0].published_at == datetime(2025, 10, 5, tzinfo=SITE_TIMEZONE)


def test_unparsable_date_falls_back_to_sentinel_and_now() -> None:
    html = results_page(result_item(details="eilen | Uutiset"))

    records = extract_records(html, now=_NOW)

    assert len(records) == 1
    assert records[0].published_at == EARLIEST
    assert records[0].display_date == current_pub_date(_NOW)
    assert not records[0].has_date


def test_missing_details_line_still_yields_record() -> None:
    html = results_page(result_item(details=None))

    records = extract_records(html, now=_NOW)

    assert len(records) == 1
    assert records[0].raw_date_text == ""
    assert records[0].published_at == EARLIEST


def test_malformed_candidates_are_skipped_without_dropping_siblings() -> None:
    html = results_page(
        result_item(href="/a/1", title="Ensimmäinen"),
        result_item(anchor=False, title="Ei linkkiä"),
        result_item(href="/a/2", title="   "),
        result_item(href=None, title="Ei hrefiä"),
        result_item(href="https://svenska.yle.fi/a/3", title="Kolmas"),
    )

    records = extract_records(html, now=_NOW)

    assert [r.title for r in records] == ["Ensimmäinen", "Kolmas"]
    assert [r.link for r in records] == [
        "https://yle.fi/a/1",
        "https://svenska.yle.fi/a/3",
    ]


def test_title_must_be_inside_the_anchor() -> None:
    html = results_page(
        '<div class="ArticleResults__SearchItemContainer-x">'
        '<a href="/a/9">Lue lisää</a><h3>Irrallinen otsikko</h3></div>'
    )

    assert extract_records(html, now=_NOW) == []


def test_containers_outside_results_wrapper_are_ignored() -> None:
    html = "<html><body>" + result_item() + "</body></html>"

    assert extract_records(html, now=_NOW) == []


def test_page_without_results_yields_empty_list() -> None:
    assert extract_records(EMPTY_PAGE) == []
    assert extract_records("") == []


def test_title_joins_every_heading_inside_the_anchor() -> None:
    html = results_page(
        '<div class="ArticleResults__SearchItemContainer-x">'
        '<a href="/a/5"><h3> </h3><h3>Toinen otsikko</h3></a>'
        '<div class="ArticleResults__DetailsLine-y">1.2.2025</div></div>'
    )

    records = extract_records(html, now=_NOW)

    assert [r.title for r in records] == ["Toinen otsikko"]
