"""HTML extraction of article records from rendered search result pages."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .config import SITE_ORIGIN
from .dates import (
    EARLIEST,
    DateNormalizeError,
    current_pub_date,
    format_pub_date,
    normalize_date,
)
from .models import Record

logger = logging.getLogger("yle_feed")

ARTICLE_CONTAINER_SELECTOR = (
    "div.elBtDR div[class^='ArticleResults__SearchItemContainer']"
)
ARTICLE_LINK_SELECTOR = "a"
TITLE_SELECTOR = "h3"
DATE_CONTAINER_SELECTOR = "div[class*='ArticleResults__DetailsLine']"
DETAILS_DELIMITER = "|"


def absolutize_link(href: str, origin: str = SITE_ORIGIN) -> str:
    """Prefix site-relative links with the site origin."""
    if href.startswith("http"):
        return href
    return origin + href


def _date_snippet(container: Tag) -> str:
    details = container.select_one(DATE_CONTAINER_SELECTOR)
    if details is None:
        return ""
    text = details.get_text()
    return text.split(DETAILS_DELIMITER, 1)[0].strip()


def extract_record(container: Tag, now: Optional[datetime] = None) -> Optional[Record]:
    """Build a record from one result container, or ``None`` to skip it."""
    anchor = container.select_one(ARTICLE_LINK_SELECTOR)
    if anchor is None:
        return None
    href = anchor.get("href")
    if not href:
        return None
    link = absolutize_link(str(href).strip())

    title = "".join(h.get_text() for h in anchor.select(TITLE_SELECTOR)).strip()
    if not title:
        return None

    raw_date_text = _date_snippet(container)
    try:
        published_at = normalize_date(raw_date_text, now=now)
    except DateNormalizeError:
        logger.debug("Unparsable date %r for %s", raw_date_text, link)
        published_at = EARLIEST
        display_date = current_pub_date(now)
    else:
        display_date = format_pub_date(published_at)

    return Record(
        title=title,
        link=link,
        raw_date_text=raw_date_text,
        published_at=published_at,
        display_date=display_date,
        guid=link,
    )


def extract_records(html: str, now: Optional[datetime] = None) -> List[Record]:
    """Return every well-formed record found in the rendered markup."""
    soup = BeautifulSoup(html, "html.parser")
    records: List[Record] = []
    for container in soup.select(ARTICLE_CONTAINER_SELECTOR):
        record = extract_record(container, now=now)
        if record is not None:
            records.append(record)
    return records
