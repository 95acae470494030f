"""Configuration objects and constants for the feed crawler."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union
from urllib.parse import quote_plus

SEARCH_BASE_URL = "https://haku.yle.fi/"
SITE_ORIGIN = "https://yle.fi"
DEFAULT_CONFIG_PATH = Path("config.json")
CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"


class ConfigError(Exception):
    """Raised when the run configuration is missing or invalid."""


@dataclass(frozen=True)
class CrawlConfig:
    """Top-level settings that control crawling, output and upload."""

    search_query: str
    search_service: str = "uutiset"
    result_type: str = "article"
    output_path: Path = Path("yle.xml")
    use_gcs: bool = False
    gcs_bucket: str = ""
    page_delay: float = 2.0
    navigation_timeout: float = 10.0
    headless: bool = True


def build_search_url(config: CrawlConfig, page: int) -> str:
    """Return the search results URL for ``page``.

    The query is wrapped in double quotes before escaping so the search
    service matches the exact phrase.
    """
    query = quote_plus(f'"{config.search_query}"')
    return (
        f"{SEARCH_BASE_URL}?page={page}&query={query}"
        f"&service={config.search_service}&type={config.result_type}"
    )


def _flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be a JSON boolean, got {value!r}")
    return value


def config_from_mapping(data: Dict[str, Any]) -> CrawlConfig:
    """Validate raw JSON settings and build a :class:`CrawlConfig`."""
    search_query = str(data.get("search_query") or "").strip()
    output_file_path = str(data.get("output_file_path") or "").strip()
    if not search_query or not output_file_path:
        raise ConfigError(
            "missing config parameters: search_query and output_file_path "
            "are required"
        )

    use_gcs = _flag(data, "useGCS", False)
    headless = _flag(data, "headless", True)
    gcs_bucket = str(data.get("GCSBucket") or "").strip()
    if use_gcs and not gcs_bucket:
        raise ConfigError("useGCS is enabled but GCSBucket is empty")

    try:
        page_delay = float(data.get("page_delay", 2.0))
        navigation_timeout = float(data.get("navigation_timeout", 10.0))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid numeric setting: {exc}") from exc
    if page_delay < 0 or navigation_timeout <= 0:
        raise ConfigError("page_delay must be >= 0 and navigation_timeout > 0")

    return CrawlConfig(
        search_query=search_query,
        search_service=str(data.get("search_service") or "").strip(),
        result_type=str(data.get("result_type") or "").strip(),
        output_path=Path(output_file_path).expanduser(),
        use_gcs=use_gcs,
        gcs_bucket=gcs_bucket,
        page_delay=page_delay,
        navigation_timeout=navigation_timeout,
        headless=headless,
    )


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> CrawlConfig:
    """Read and validate a JSON configuration file."""
    config_path = Path(path).expanduser()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"read file error: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"json parse error: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("config file must contain a JSON object")
    return config_from_mapping(data)


def check_credentials(config: CrawlConfig) -> None:
    """Ensure cloud credentials are available when an upload is requested."""
    if config.use_gcs and not os.getenv(CREDENTIALS_ENV_VAR):
        raise ConfigError(
            f"useGCS is enabled but {CREDENTIALS_ENV_VAR} is not set"
        )
