"""Surface serialization and download hand-off.

Two strategies produce the same :class:`Download`:

* ``BLOB``: the PNG is encoded off the event loop and delivered through a
  callback once ready. Used when assets are served over the network.
* ``DATA_URL``: the PNG is encoded synchronously and embedded in a
  ``data:`` URL. Used in the restricted local-file context.

Both refuse to run before a base size is chosen or before a render has
completed, and neither delivers anything when encoding fails.
"""

import asyncio
import base64
import io
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from xwing_base.compositor import Surface
from xwing_base.errors import ExportError
from xwing_base.state import Selection
from xwing_base.types import ExecutionContext, ExportStrategy

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "xwing-base"
EXPORT_EXTENSION = ".png"
EXPORT_MIME = "image/png"


@dataclass(frozen=True)
class Download:
    """A finished export ready for the user.

    Attributes:
        filename: Suggested file name.
        data: Encoded PNG bytes.
        strategy: Strategy that produced it.
        data_url: Embedded ``data:`` URL (``DATA_URL`` strategy only).
    """

    filename: str
    data: bytes
    strategy: ExportStrategy
    data_url: Optional[str] = None

    def save(self, directory: Path | str) -> Path:
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


DownloadSink = Callable[[Download], None]

_timestamp_lock = threading.Lock()
_last_timestamp = 0


def next_timestamp(now: Optional[Callable[[], float]] = None) -> int:
    """Epoch milliseconds, strictly increasing across calls in this process."""
    global _last_timestamp
    millis = int((now or time.time)() * 1000)
    with _timestamp_lock:
        if millis <= _last_timestamp:
            millis = _last_timestamp + 1
        _last_timestamp = millis
    return millis


def export_filename(prefix: str, selection: Selection, timestamp: int) -> str:
    return f"{prefix}-{selection.base_size}-{timestamp}{EXPORT_EXTENSION}"


def strategy_for(context: ExecutionContext) -> ExportStrategy:
    if context is ExecutionContext.NETWORK:
        return ExportStrategy.BLOB
    return ExportStrategy.DATA_URL


def check_exportable(surface: Optional[Surface], selection: Selection) -> Surface:
    """Raise :class:`ExportError` unless ``surface`` is a finished render."""
    if selection.base_size is None:
        raise ExportError("Please select a base size first")
    if surface is None or surface.area == 0 or not surface.rendered:
        raise ExportError("The preview has not finished rendering yet")
    return surface


def encode_png(surface: Surface) -> bytes:
    buf = io.BytesIO()
    try:
        surface.image.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise ExportError(f"Could not encode image: {e}") from e
    return buf.getvalue()


def to_data_url(data: bytes) -> str:
    return f"data:{EXPORT_MIME};base64,{base64.b64encode(data).decode('ascii')}"


def export_surface(
    surface: Optional[Surface],
    selection: Selection,
    deliver: DownloadSink,
    prefix: str = DEFAULT_PREFIX,
) -> Download:
    """Synchronous ``DATA_URL`` export.

    Raises:
        ExportError: If the export is rejected or encoding fails.
    """
    ready = check_exportable(surface, selection)
    filename = export_filename(prefix, selection, next_timestamp())
    data = encode_png(ready)
    download = Download(
        filename=filename,
        data=data,
        strategy=ExportStrategy.DATA_URL,
        data_url=to_data_url(data),
    )
    deliver(download)
    logger.info("Exported %s (%d bytes)", filename, len(data))
    return download


async def export_surface_async(
    surface: Optional[Surface],
    selection: Selection,
    deliver: DownloadSink,
    prefix: str = DEFAULT_PREFIX,
) -> Download:
    """``BLOB`` export: encoding runs in a worker thread, then ``deliver`` fires.

    Raises:
        ExportError: If the export is rejected or encoding fails.
    """
    ready = check_exportable(surface, selection)
    filename = export_filename(prefix, selection, next_timestamp())
    data = await asyncio.to_thread(encode_png, ready)
    download = Download(filename=filename, data=data, strategy=ExportStrategy.BLOB)
    deliver(download)
    logger.info("Exported %s (%d bytes)", filename, len(data))
    return download
