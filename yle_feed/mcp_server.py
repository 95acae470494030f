"""MCP server exposing the Yle search feed as a tool."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import CrawlConfig, build_search_url
from .crawler import crawl
from .feed import render_feed, synthesize

logger = logging.getLogger("yle_feed.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="yle-feed")


async def _build_feed(config: CrawlConfig) -> str:
    result = await crawl(config)
    document = synthesize(
        result.records, build_search_url(config, 1), config.search_query
    )
    return render_feed(document).decode("utf-8")


@mcp.tool()
async def feed(
    query: str,
    service: str = "uutiset",
    result_type: str = "article",
) -> str:
    """Crawl Yle search results for an exact phrase and return them as RSS XML."""

    query = query.strip()
    if not query:
        raise ValueError("query must not be empty")
    config = CrawlConfig(
        search_query=query,
        search_service=service,
        result_type=result_type,
    )
    return await _build_feed(config)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
