"""RSS 2.0 synthesis and serialization for crawled records."""

from __future__ import annotations

import re
from typing import Sequence
from xml.etree import ElementTree as ET

from .models import FeedDocument, FeedItem, Record

FEED_LANGUAGE = "fi"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Anything outside the XML 1.0 Char production.
INVALID_XML_CHARS = re.compile(
    r"[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


class FeedSerializationError(Exception):
    """Raised when a feed document cannot be turned into XML."""


def synthesize(records: Sequence[Record], origin_url: str, query: str) -> FeedDocument:
    """Map already-sorted records onto an RSS channel, one item per record."""
    items = tuple(
        FeedItem(
            title=record.title,
            link=record.link,
            pub_date=record.display_date,
            guid=record.guid,
        )
        for record in records
    )
    return FeedDocument(
        title=f"Yle Search Results for '{query}'",
        link=origin_url,
        description=f"Articles from Yle generated via scraping for: {query}",
        language=FEED_LANGUAGE,
        items=items,
    )


def _text_element(parent: ET.Element, tag: str, text: str) -> None:
    ET.SubElement(parent, tag).text = INVALID_XML_CHARS.sub("\ufffd", text)


def build_element(document: FeedDocument) -> ET.Element:
    """Build the ``<rss>`` element tree for ``document``."""
    rss = ET.Element("rss", {"version": document.version})
    channel = ET.SubElement(rss, "channel")
    _text_element(channel, "title", document.title)
    _text_element(channel, "link", document.link)
    _text_element(channel, "description", document.description)
    _text_element(channel, "language", document.language)
    for item in document.items:
        node = ET.SubElement(channel, "item")
        _text_element(node, "title", item.title)
        _text_element(node, "link", item.link)
        _text_element(node, "pubDate", item.pub_date)
        _text_element(node, "guid", item.guid)
    return rss


def render_feed(document: FeedDocument) -> bytes:
    """Serialize ``document`` to indented UTF-8 XML with a declaration."""
    try:
        root = build_element(document)
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
    except (TypeError, ValueError) as exc:
        raise FeedSerializationError(f"Error marshaling XML: {exc}") from exc
    return (XML_HEADER + body + "\n").encode("utf-8")
