"""Utility helpers for naming uploaded objects."""

from __future__ import annotations

import re

WHITESPACE_PATTERN = re.compile(r"\s+")


def object_name_for_query(query: str) -> str:
    """Name the uploaded feed after the query with its spaces removed."""
    return WHITESPACE_PATTERN.sub("", query) + ".xml"
