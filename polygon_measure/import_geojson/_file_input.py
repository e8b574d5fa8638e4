"""File input for GeoJSON import.

A file is read to completion or not at all; there is no streamed or
partial consumption. The extension is checked before any read.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from polygon_measure.import_geojson._validation import FileReadError, validate_extension

logger = logging.getLogger("polygon_measure.import_geojson")


def read_document(path: Path | str) -> str:
    """Read a ``.geojson`` / ``.json`` file as UTF-8 text.

    Raises:
        UnsupportedFileTypeError: If the extension is not allowed (no
            read is attempted).
        FileReadError: If the file cannot be read or decoded.
    """
    path = Path(path)
    validate_extension(path.name)

    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read {path.name}: {exc}"
        raise FileReadError(msg) from exc

    logger.info("File read | file=%s | bytes=%d", path.name, len(text))
    return text


async def read_document_async(path: Path | str) -> str:
    """Read a document without blocking the event loop.

    Same contract as ``read_document``; the read runs in a worker thread.
    """
    return await asyncio.to_thread(read_document, path)
