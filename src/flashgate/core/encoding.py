"""Conversion of staged files into inline-data request parts."""

from __future__ import annotations

import asyncio
import base64
from pathlib import Path

from flashgate.core.parts import InlineData, InlineDataPart


async def encode_file(path: Path, mime_type: str) -> InlineDataPart:
    """Read a file and wrap its base64 encoding as an inline-data part.

    The whole file is read into memory in a worker thread.  No size limit is
    applied here; the provider rejects oversized payloads itself.

    Args:
        path: Staged file to read.
        mime_type: MIME type to declare for the payload.

    Returns:
        An :class:`InlineDataPart` carrying the encoded bytes.
    """
    raw = await asyncio.to_thread(Path(path).read_bytes)
    encoded = base64.b64encode(raw).decode("ascii")
    return InlineDataPart(inline_data=InlineData(mime_type=mime_type, data=encoded))
