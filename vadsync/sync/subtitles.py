"""Interface of the external subtitle parser/writer, plus file access helpers."""
from typing import List, Optional, Protocol, Sequence, Tuple

from vadsync.core.errors import (
    DoesNotExistError,
    InternalSyncError,
    ParseError,
    PermissionDeniedError,
    SubtitleReadError,
    SubtitleSerializeError,
    SubtitleWriteError,
    UnsupportedFormatError,
)
from vadsync.core.logging import logger
from vadsync.sync.intervals import TimeInterval


class UpdatingEntriesNotSupported(Exception):
    """Raised by a subtitle document whose format cannot be rewritten."""

    def __init__(self, format: str):
        self.format = format
        super().__init__(f"updating entries is not supported for '{format}' subtitles")


class SubtitleDocument(Protocol):
    """A parsed subtitle file."""

    format: str

    def entries(self) -> List[Tuple[int, int]]:
        """(start_ms, end_ms) of every entry, in file order; not necessarily ordered."""
        ...

    def update_entries(self, intervals: Sequence[TimeInterval]) -> None:
        """Replace entry timings, one interval per entry."""
        ...

    def to_bytes(self) -> bytes:
        ...


class SubtitleHandler(Protocol):
    """Detects, parses and judges subtitle formats."""

    def detect_format(self, path: str, data: bytes) -> str:
        """Name of the format of `data`; raises if it cannot be determined."""
        ...

    def parse(self, data: bytes, format: str, encoding: Optional[str]) -> SubtitleDocument:
        """Parse raw bytes; `encoding=None` means detect automatically."""
        ...

    def supports_updates(self, path: str, format: str) -> bool:
        """Whether entries of this format (at this path) can be rewritten."""
        ...


def read_file_bytes(path: str) -> bytes:
    """Read a subtitle file in its entirety."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except FileNotFoundError as exc:
        raise DoesNotExistError(path) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(path) from exc
    except OSError as exc:
        raise SubtitleReadError(path, exc) from exc


def open_subtitle(
    path: str,
    handler: SubtitleHandler,
    encoding: Optional[str] = None
) -> SubtitleDocument:
    """
    Read and parse a subtitle file.

    Args:
        path: Subtitle file path
        handler: Subtitle format handler
        encoding: Character encoding, or None to let the handler detect it

    Returns:
        Parsed SubtitleDocument
    """
    data = read_file_bytes(path)
    try:
        format = handler.detect_format(path, data)
    except Exception as exc:
        raise UnsupportedFormatError(path) from exc

    try:
        document = handler.parse(data, format, encoding)
    except Exception as exc:
        logger.error(f"Error parsing '{path}' as {format}: {exc}")
        raise ParseError(path) from exc
    return document


def save_subtitle(path: str, document: SubtitleDocument) -> None:
    """Serialize a subtitle document and write it to `path`."""
    try:
        data = document.to_bytes()
    except Exception as exc:
        raise SubtitleSerializeError(path, exc) from exc

    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise SubtitleWriteError(path, exc) from exc


def update_entries(path: str, document: SubtitleDocument, intervals: Sequence[TimeInterval]) -> None:
    """Hand corrected intervals to the document, mapping writer failures."""
    try:
        document.update_entries(intervals)
    except UpdatingEntriesNotSupported as exc:
        raise UnsupportedFormatError(path, exc.format) from exc
    except Exception as exc:
        raise InternalSyncError(f"Error while updating subtitle entries ({exc})") from exc


def is_format_supported(path: str, handler: SubtitleHandler) -> None:
    """
    Ensure the subtitle file at `path` can be synchronized.

    Raises:
        UnsupportedFormatError: if the format cannot be updated
        DoesNotExistError, PermissionDeniedError, SubtitleReadError: on I/O failure
        InternalSyncError: if format detection fails for another reason
    """
    data = read_file_bytes(path)
    try:
        format = handler.detect_format(path, data)
    except UpdatingEntriesNotSupported as exc:
        raise UnsupportedFormatError(path, exc.format) from exc
    except Exception as exc:
        raise InternalSyncError(f"Error while determining subtitle format ({exc})") from exc

    if not handler.supports_updates(path, format):
        raise UnsupportedFormatError(path, format)
