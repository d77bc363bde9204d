"""File-content providers.

A provider is any zero-argument coroutine function returning the file text;
failures surface as :class:`~tencents.errors.ReadError`. Reading is the only
suspension point of an import: decoding and aggregation run synchronously once
the text is available.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from os import PathLike
from pathlib import Path

from .errors import ReadError

type ContentProvider = Callable[[], Awaitable[str]]


def read_csv_text(path: str | PathLike[str]) -> str:
    """Read a ``.csv`` file as UTF-8 text (a leading BOM is dropped)."""

    p = Path(path)
    if p.suffix.lower() != ".csv":
        raise ReadError(f"Please upload a CSV file: {p.name}")
    try:
        return p.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ReadError(f"File not found: {p}") from exc
    except PermissionError as exc:
        raise ReadError(f"Permission denied: {p}") from exc
    except IsADirectoryError as exc:
        raise ReadError(f"Not a file: {p}") from exc
    except UnicodeDecodeError as exc:
        raise ReadError(f"File is not valid UTF-8 text: {p}") from exc
    except OSError as exc:
        raise ReadError(f"Error reading file {p}: {exc}") from exc


def file_provider(path: str | PathLike[str]) -> ContentProvider:
    """Return a provider that reads ``path`` off the event loop thread."""

    async def _read() -> str:
        return await asyncio.to_thread(read_csv_text, path)

    return _read


def text_provider(text: str) -> ContentProvider:
    async def _read() -> str:
        return text

    return _read


__all__ = ["ContentProvider", "file_provider", "read_csv_text", "text_provider"]
