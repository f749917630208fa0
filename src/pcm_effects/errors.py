"""Error taxonomy shared by the audio and effect layers."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    BROKEN_HEADER = "broken_header"
    FORMAT_NOT_SUPPORTED = "format_not_supported"
    UNSUPPORTED_FILE_EXTENSION = "unsupported_file_extension"
    NO_SUCH_FILE = "no_such_file"
    INVALID_PARAMETER = "invalid_parameter"
    UNSUPPORTED_CHANNEL_LAYOUT = "unsupported_channel_layout"
    UNINITIALIZED = "uninitialized"
    GENERIC = "generic"


DEFAULT_ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.BROKEN_HEADER: "File header is missing information (probably corrupted).",
    ErrorKind.FORMAT_NOT_SUPPORTED: "Audio format is not supported.",
    ErrorKind.UNSUPPORTED_FILE_EXTENSION: "File format is not supported.",
    ErrorKind.NO_SUCH_FILE: "File does not exist, or it's not accessible.",
    ErrorKind.INVALID_PARAMETER: "Invalid effect parameter.",
    ErrorKind.UNSUPPORTED_CHANNEL_LAYOUT: "This effect cannot be run on single channel audio.",
    ErrorKind.UNINITIALIZED: "Audio object not initialized.",
    ErrorKind.GENERIC: "Something went wrong.",
}


class EffectError(RuntimeError):
    """Base class for failures raised while preparing or running an effect."""

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or DEFAULT_ERROR_MESSAGES[self.kind])

    @property
    def message(self) -> str:
        return str(self)


class BrokenHeaderError(EffectError):
    kind = ErrorKind.BROKEN_HEADER


class FormatNotSupportedError(EffectError):
    kind = ErrorKind.FORMAT_NOT_SUPPORTED


class UnsupportedFileExtensionError(EffectError):
    kind = ErrorKind.UNSUPPORTED_FILE_EXTENSION


class NoSuchFileError(EffectError):
    kind = ErrorKind.NO_SUCH_FILE


class InvalidParameterError(EffectError):
    kind = ErrorKind.INVALID_PARAMETER


class UnsupportedChannelLayoutError(EffectError):
    kind = ErrorKind.UNSUPPORTED_CHANNEL_LAYOUT


class UninitializedError(EffectError):
    kind = ErrorKind.UNINITIALIZED


class GenericEffectError(EffectError):
    kind = ErrorKind.GENERIC
