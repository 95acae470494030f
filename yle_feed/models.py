"""Data models used throughout the crawl and feed pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple

from .dates import EARLIEST


@dataclass
class Record:
    """A single article discovered on a search results page."""

    title: str
    link: str
    raw_date_text: str
    published_at: datetime
    display_date: str
    guid: str

    @property
    def has_date(self) -> bool:
        return self.published_at != EARLIEST


class CrawlOutcome(enum.Enum):
    """Reason the pagination loop stopped."""

    PAGE_FETCH_FAILED = "page_fetch_failed"
    NO_ARTICLES_FIRST_PAGE = "no_articles_first_page"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class CrawlResult:
    """Sorted records and bookkeeping for a finished crawl."""

    records: List[Record]
    outcome: CrawlOutcome
    pages_fetched: int
    last_page: int


@dataclass(frozen=True)
class FeedItem:
    """One ``<item>`` entry of the RSS channel."""

    title: str
    link: str
    pub_date: str
    guid: str


@dataclass(frozen=True)
class FeedDocument:
    """RSS 2.0 document with channel metadata and ordered items."""

    title: str
    link: str
    description: str
    language: str
    items: Tuple[FeedItem, ...] = field(default_factory=tuple)
    version: str = "2.0"
