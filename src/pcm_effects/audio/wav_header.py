"""RIFF/WAVE header parsing, validation and canonical header synthesis."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pcm_effects.audio.codec import I16_MAX, I16_MIN, I24_MAX, I24_MIN, read_u16, read_u32, write_u16, write_u32
from pcm_effects.audio.stream import AudioStream
from pcm_effects.errors import (
    BrokenHeaderError,
    FormatNotSupportedError,
    GenericEffectError,
    NoSuchFileError,
    UnsupportedFileExtensionError,
)

logger = logging.getLogger(__name__)

HEADER_BUFFER_SIZE = 4096
HEADER_SAFETY_MARGIN = 256
CANONICAL_HEADER_SIZE = 44
PCM_FORMAT_TAG = 1
SUPPORTED_BIT_DEPTHS: tuple[int, ...] = (16, 24)

_FMT_MIN_SIZE = 16


@dataclass(frozen=True, slots=True)
class FormatDescriptor:
    sample_rate: int
    bit_depth: int
    channels: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bit_depth // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align

    @property
    def sample_min(self) -> int:
        return I24_MIN if self.bit_depth == 24 else I16_MIN

    @property
    def sample_max(self) -> int:
        return I24_MAX if self.bit_depth == 24 else I16_MAX


@dataclass(frozen=True, slots=True)
class AudioRegion:
    begin: int
    end: int

    def __post_init__(self) -> None:
        if self.begin < 0 or self.end <= self.begin:
            raise ValueError(f"invalid audio region [{self.begin}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.begin


@dataclass(frozen=True, slots=True)
class WavHeader:
    format: FormatDescriptor
    region: AudioRegion
    fmt_offset: int
    data_offset: int


def check_extension(path: str | Path) -> None:
    # whole path, so "dir/.wav" passes and a bare ".wav" does not
    text = str(path).lower()
    if len(text) < 5 or not text.endswith(".wav"):
        raise UnsupportedFileExtensionError()


def parse_header(data: bytes) -> WavHeader:
    """Parse the leading bytes of a WAV file.

    Only the first ``HEADER_BUFFER_SIZE`` bytes are considered; shorter input
    is zero-padded. Chunks before ``fmt `` and between ``fmt `` and ``data``
    (``LIST``, ``fact``, ``bext``...) are skipped by their declared size.
    """
    header = bytes(data[:HEADER_BUFFER_SIZE]).ljust(HEADER_BUFFER_SIZE, b"\x00")

    if header[0:4] != b"RIFF" or header[8:12] != b"WAVE":
        raise BrokenHeaderError()

    fmt_pos = _find_chunk(header, b"fmt ", 12, min_size=24)
    fmt_size = read_u32(header, fmt_pos + 4)
    if fmt_size < _FMT_MIN_SIZE:
        raise BrokenHeaderError()

    format_tag = read_u16(header, fmt_pos + 8)
    if format_tag != PCM_FORMAT_TAG:
        raise FormatNotSupportedError()

    channels = read_u16(header, fmt_pos + 10)
    sample_rate = read_u32(header, fmt_pos + 12)
    bit_depth = read_u16(header, fmt_pos + 22)
    if channels < 1:
        raise BrokenHeaderError()

    data_pos = _find_chunk(header, b"data", fmt_pos + fmt_size + 8, min_size=8)
    data_size = read_u32(header, data_pos + 4)
    if data_size == 0:
        raise BrokenHeaderError()
    begin = data_pos + 8

    if bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise FormatNotSupportedError()

    return WavHeader(
        format=FormatDescriptor(sample_rate=sample_rate, bit_depth=bit_depth, channels=channels),
        region=AudioRegion(begin=begin, end=begin + data_size),
        fmt_offset=fmt_pos,
        data_offset=data_pos,
    )


def _find_chunk(header: bytes, tag: bytes, start: int, min_size: int) -> int:
    limit = HEADER_BUFFER_SIZE - HEADER_SAFETY_MARGIN
    pos = start
    while header[pos : pos + 4] != tag:
        if pos >= limit:
            raise BrokenHeaderError()
        pos += read_u32(header, pos + 4) + 8
    if pos + min_size > len(header):
        raise BrokenHeaderError()
    return pos


def read_header(path: str | Path) -> WavHeader:
    check_extension(path)
    try:
        stream = AudioStream.open_read(path)
    except OSError as exc:
        raise NoSuchFileError() from exc

    with stream:
        try:
            parsed = parse_header(stream.read_at(0, HEADER_BUFFER_SIZE))
        except OSError as exc:
            raise NoSuchFileError() from exc
        file_size = stream.length

    region = parsed.region
    if region.end > file_size:
        if region.begin >= file_size:
            raise BrokenHeaderError()
        logger.warning(
            "data chunk of %s declares %d bytes but only %d are present; truncating",
            path,
            region.length,
            file_size - region.begin,
        )
        parsed = WavHeader(
            format=parsed.format,
            region=AudioRegion(begin=region.begin, end=file_size),
            fmt_offset=parsed.fmt_offset,
            data_offset=parsed.data_offset,
        )
    return parsed


def synthesize_header(payload_bytes: int, fmt: FormatDescriptor) -> bytes:
    if payload_bytes < 0 or payload_bytes + 36 > 0xFFFFFFFF:
        raise GenericEffectError(f"Audio data size {payload_bytes} does not fit a WAV header.")

    header = bytearray(CANONICAL_HEADER_SIZE)
    header[0:4] = b"RIFF"
    header[8:12] = b"WAVE"
    header[12:16] = b"fmt "
    header[36:40] = b"data"
    try:
        write_u32(payload_bytes + 36, header, 4)
        write_u32(_FMT_MIN_SIZE, header, 16)
        write_u16(PCM_FORMAT_TAG, header, 20)
        write_u16(fmt.channels, header, 22)
        write_u32(fmt.sample_rate, header, 24)
        write_u32(fmt.byte_rate, header, 28)
        write_u16(fmt.block_align, header, 32)
        write_u16(fmt.bit_depth, header, 34)
        write_u32(payload_bytes, header, 40)
    except ValueError as exc:
        raise GenericEffectError(f"Cannot describe this audio format in a WAV header: {exc}") from exc
    return bytes(header)
