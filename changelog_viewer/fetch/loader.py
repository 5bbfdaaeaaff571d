"""
Retrieval of the changelog document.

A source is either an http(s) URL, fetched with httpx, or a local file path.
Retrieval failures become FetchError; a body that is not JSON or not a
changelog becomes SchemaError.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
import logging
from pathlib import Path
import time
from typing import Any
from urllib.parse import urlparse

import httpx

from ..config import FetchConfig
from ..core.schema import parse_document
from ..core.types import ChangelogDocument
from ..errors import FetchError, SchemaError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result of retrieving a source.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code is None for local files and network-level failures.

    Attributes:
        source: The URL or path that was read
        status_code: HTTP status code, if any
        text: The body text, or None on error
        error: Error message if retrieval failed, None on success
    """
    source: str
    status_code: int | None
    text: str | None
    error: str | None


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def fetch_source(
    source: str,
    cfg: FetchConfig,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Read a changelog source synchronously.

    Args:
        source: http(s) URL or local file path
        cfg: Timeout, retry, proxy and user agent settings
        transport: Optional httpx transport, used to stub the network

    Returns:
        FetchResult with text on success or error message on failure
    """
    if not is_url(source):
        return _read_file(source)

    last_error: str | None = None
    for attempt in range(cfg.retries + 1):
        try:
            with _client(cfg, transport) as client:
                resp = client.get(source)
            return _from_response(source, resp)
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            logger.debug("Fetch attempt %d for %s failed: %s", attempt + 1, source, last_error)
            if attempt < cfg.retries:
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(source=source, status_code=None, text=None, error=last_error)


async def fetch_source_async(
    source: str,
    cfg: FetchConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Async variant of fetch_source using httpx.AsyncClient."""
    if not is_url(source):
        return _read_file(source)

    last_error: str | None = None
    for attempt in range(cfg.retries + 1):
        try:
            async with httpx.AsyncClient(
                timeout=cfg.timeout_seconds,
                headers={"User-Agent": cfg.user_agent},
                follow_redirects=True,
                trust_env=cfg.trust_env,
                transport=transport,
            ) as client:
                resp = await client.get(source)
            return _from_response(source, resp)
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < cfg.retries:
                await asyncio.sleep(0.5 * (attempt + 1))

    return FetchResult(source=source, status_code=None, text=None, error=last_error)


def decode_json(result: FetchResult) -> Any:
    """Decode a successful FetchResult body.

    Raises:
        FetchError: If the result carries a retrieval error
        SchemaError: If the body is not valid JSON
    """
    if result.error is not None or result.text is None:
        raise FetchError(result.source, result.error or "empty response")
    try:
        return json.loads(result.text)
    except json.JSONDecodeError as exc:
        raise SchemaError("", f"invalid JSON: {exc.msg} (line {exc.lineno})") from exc


def load_changelog(
    source: str,
    cfg: FetchConfig,
    check_dates: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> ChangelogDocument:
    """Fetch, decode and validate a changelog.

    Raises:
        FetchError: If the source cannot be retrieved
        SchemaError: If the content is not a valid changelog
    """
    result = fetch_source(source, cfg, transport=transport)
    return _to_document(result, check_dates)


async def load_changelog_async(
    source: str,
    cfg: FetchConfig,
    check_dates: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ChangelogDocument:
    result = await fetch_source_async(source, cfg, transport=transport)
    return _to_document(result, check_dates)


def _to_document(result: FetchResult, check_dates: bool) -> ChangelogDocument:
    raw = decode_json(result)
    document = parse_document(raw, check_dates=check_dates)
    logger.info(
        "Loaded changelog %s",
        result.source,
        extra={"source": result.source, "entries": len(document.entries)},
    )
    return document


def _client(cfg: FetchConfig, transport: httpx.BaseTransport | None) -> httpx.Client:
    return httpx.Client(
        timeout=cfg.timeout_seconds,
        headers={"User-Agent": cfg.user_agent},
        follow_redirects=True,
        trust_env=cfg.trust_env,
        transport=transport,
    )


def _from_response(source: str, resp: httpx.Response) -> FetchResult:
    if resp.is_error:
        return FetchResult(
            source=source,
            status_code=resp.status_code,
            text=None,
            error=f"HTTP {resp.status_code}",
        )
    return FetchResult(source=source, status_code=resp.status_code, text=resp.text, error=None)


def _read_file(source: str) -> FetchResult:
    path = Path(source).expanduser()
    try:
        text = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return FetchResult(
            source=source,
            status_code=None,
            text=None,
            error=f"{type(exc).__name__}: {exc}",
        )
    return FetchResult(source=source, status_code=None, text=text, error=None)
