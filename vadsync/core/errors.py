"""Error kinds and exception hierarchy."""
from enum import IntEnum
from typing import Optional


class ErrorKind(IntEnum):
    """Closed set of error kinds with stable integer codes."""
    INTERNAL_ERROR = 1
    INVALID_PARAMS = 2
    SINK_CLOSED = 3
    UNSUPPORTED_FORMAT = 4
    READ_ERROR = 5
    FILE_DOES_NOT_EXIST = 6
    PERMISSION_DENIED = 7
    PARSE_ERROR = 8
    WRITE_ERROR = 9
    SERIALIZE_ERROR = 10
    VOICE_DETECTION_ERROR = 12
    DESERIALIZE_ERROR = 13
    CLASSIFIER_INIT_ERROR = 14


class VadSyncError(Exception):
    """Base error for vadsync."""
    kind = ErrorKind.INTERNAL_ERROR

    @property
    def code(self) -> int:
        return int(self.kind)


# Audio sink / classifier

class SinkClosedError(VadSyncError):
    """Raised when samples are sent to a sink that has been closed."""
    kind = ErrorKind.SINK_CLOSED

    def __init__(self):
        super().__init__("Cannot write samples to sink after it's been closed")


class VoiceDetectionError(VadSyncError):
    """Raised when a classifier fails or receives a malformed frame."""
    kind = ErrorKind.VOICE_DETECTION_ERROR


class ClassifierInitError(VadSyncError):
    """Raised when a voice classifier cannot load its resources."""
    kind = ErrorKind.CLASSIFIER_INIT_ERROR


# Interval persistence

class IntervalLoadError(VadSyncError):
    """Base error for reading persisted intervals."""


class IntervalFileNotFoundError(IntervalLoadError):
    kind = ErrorKind.FILE_DOES_NOT_EXIST

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Span file does not exist (path='{path}')")


class IntervalReadError(IntervalLoadError):
    kind = ErrorKind.READ_ERROR

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error reading timespans from disk (msg='{cause}', path='{path}')")


class IntervalDeserializeError(IntervalLoadError):
    kind = ErrorKind.DESERIALIZE_ERROR

    def __init__(self, message: str):
        super().__init__(f"Error parsing timespans from bytes (msg='{message}')")


class IntervalSaveError(VadSyncError):
    """Base error for persisting intervals."""


class IntervalWriteError(IntervalSaveError):
    kind = ErrorKind.WRITE_ERROR

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error saving timespan data to disk! (msg='{cause}', path='{path}')")


class IntervalSerializeError(IntervalSaveError):
    kind = ErrorKind.SERIALIZE_ERROR

    def __init__(self, message: str):
        super().__init__(f"Error serializing timespans to bytes! (msg='{message}')")


# Subtitle synchronization

class SyncError(VadSyncError):
    """Base error for subtitle synchronization."""


class UnsupportedFormatError(SyncError):
    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, path: str, format: Optional[str] = None):
        self.path = path
        self.format = format
        super().__init__(
            f"Subtitle format not supported (path='{path}', format='{format or 'N/A'}')"
        )


class SubtitleReadError(SyncError):
    kind = ErrorKind.READ_ERROR

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error reading subtitle file from disk (msg='{cause}' path='{path}')")


class DoesNotExistError(SyncError):
    kind = ErrorKind.FILE_DOES_NOT_EXIST

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Subtitle file does not exist (path='{path}')")


class PermissionDeniedError(SyncError):
    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Insufficient privileges to open subtitle file (path='{path}')")


class ParseError(SyncError):
    kind = ErrorKind.PARSE_ERROR

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Error parsing subtitle file (path='{path}')")


class SubtitleWriteError(SyncError):
    kind = ErrorKind.WRITE_ERROR

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error writing subtitle data to disk (msg='{cause}' path='{path}')")


class SubtitleSerializeError(SyncError):
    kind = ErrorKind.SERIALIZE_ERROR

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Error serializing subtitle data (msg='{cause}', path='{path}')")


class InternalSyncError(SyncError):
    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Unknown sync error occurred (msg='{message}')")
