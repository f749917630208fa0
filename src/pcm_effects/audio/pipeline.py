"""Buffered read -> transform -> write pipeline over a staging file.

The payload is never loaded whole: each phase walks the data region in
``BufferLayout.bytes``-sized chunks with explicit absolute offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from pcm_effects.audio.codec import decode_samples, encode_samples
from pcm_effects.audio.stream import AudioStream
from pcm_effects.audio.wav_header import AudioRegion, FormatDescriptor, WavHeader, synthesize_header
from pcm_effects.errors import GenericEffectError, NoSuchFileError

logger = logging.getLogger(__name__)

BUFFER_SIZE_FRAMES = 512

SampleTransform = Callable[[list[int], FormatDescriptor], list[int]]
StagingHook = Callable[[], None]


@dataclass(frozen=True, slots=True)
class BufferLayout:
    frames: int
    samples: int
    bytes: int
    frame_bytes: int

    @staticmethod
    def for_format(fmt: FormatDescriptor, frames: int = BUFFER_SIZE_FRAMES) -> BufferLayout:
        if frames < 1:
            raise ValueError("buffer must hold at least one frame")
        samples = frames * fmt.channels
        return BufferLayout(
            frames=frames,
            samples=samples,
            bytes=samples * fmt.bytes_per_sample,
            frame_bytes=fmt.block_align,
        )


@dataclass(frozen=True, slots=True)
class PipelineContext:
    input_path: Path
    staging_path: Path
    output_path: Path
    header: WavHeader
    layout: BufferLayout

    @property
    def format(self) -> FormatDescriptor:
        return self.header.format

    @property
    def region(self) -> AudioRegion:
        """Data region trimmed to whole frames."""
        region = self.header.region
        usable = region.length - region.length % self.layout.frame_bytes
        if usable <= 0:
            raise GenericEffectError("Audio data is shorter than one frame.")
        return AudioRegion(begin=region.begin, end=region.begin + usable)


def create_staging(path: Path) -> AudioStream:
    try:
        return AudioStream.create(path)
    except OSError as exc:
        raise GenericEffectError("Could not create temporary DSP file.") from exc


def _open_input(ctx: PipelineContext) -> AudioStream:
    try:
        return AudioStream.open_read(ctx.input_path)
    except OSError as exc:
        raise NoSuchFileError() from exc


def _read_exact(source: AudioStream, offset: int, size: int) -> bytes:
    try:
        data = source.read_at(offset, size)
    except ValueError as exc:
        raise GenericEffectError("Input file ended before its audio data did.") from exc
    if len(data) < size:
        raise GenericEffectError("Input file ended before its audio data did.")
    return data


def _read_buffer(source: AudioStream, offset: int, meaningful: int, size: int) -> bytes:
    # zero padding keeps the tail of a partial buffer deterministic
    return _read_exact(source, offset, meaningful).ljust(size, b"\x00")


def _warn_dropped_tail(ctx: PipelineContext, region: AudioRegion) -> None:
    dropped = ctx.header.region.length - region.length
    if dropped:
        logger.warning("ignoring %d trailing bytes that do not form a complete frame", dropped)


def stream_transform(ctx: PipelineContext, transform: SampleTransform, on_staging: StagingHook | None = None) -> int:
    """Walk the data region front to back into a fresh staging file.

    ``on_staging`` is called once the staging file exists. Returns the
    number of payload bytes written to staging.
    """
    region = ctx.region
    _warn_dropped_tail(ctx, region)
    fmt = ctx.format
    layout = ctx.layout

    with _open_input(ctx) as source, create_staging(ctx.staging_path) as staging:
        if on_staging is not None:
            on_staging()
        position = region.begin
        chunks = 0
        try:
            while position < region.end:
                meaningful = min(layout.bytes, region.end - position)
                raw = _read_buffer(source, position, meaningful, layout.bytes)
                processed = transform(decode_samples(raw, fmt.bit_depth), fmt)
                staging.append(encode_samples(processed, fmt.bit_depth)[:meaningful])
                position += layout.bytes
                chunks += 1
        except OSError as exc:
            raise GenericEffectError() from exc
        written = staging.length

    logger.debug("staged %d bytes in %d chunks", written, chunks)
    return written


def stream_reverse(ctx: PipelineContext, transform: SampleTransform, on_staging: StagingHook | None = None) -> int:
    """Walk the data region back to front into a fresh staging file.

    The partial chunk at the tail (``total_frames % frames`` frames) is
    written first, then full buffers are taken walking back to the region
    start. ``transform`` reverses frame order inside each buffer.
    """
    region = ctx.region
    _warn_dropped_tail(ctx, region)
    fmt = ctx.format
    layout = ctx.layout

    total_frames = region.length // layout.frame_bytes
    remainder_bytes = (total_frames % layout.frames) * layout.frame_bytes

    with _open_input(ctx) as source, create_staging(ctx.staging_path) as staging:
        if on_staging is not None:
            on_staging()
        position = region.end - remainder_bytes
        chunks = 0
        try:
            if remainder_bytes:
                raw = _read_exact(source, position, remainder_bytes)
                processed = transform(decode_samples(raw, fmt.bit_depth), fmt)
                staging.append(encode_samples(processed, fmt.bit_depth))
                chunks += 1

            while position > region.begin:
                position = max(position - layout.bytes, region.begin)
                meaningful = min(layout.bytes, region.end - position)
                raw = _read_buffer(source, position, meaningful, layout.bytes)
                processed = transform(decode_samples(raw, fmt.bit_depth), fmt)
                staging.append(encode_samples(processed, fmt.bit_depth)[:meaningful])
                chunks += 1
        except OSError as exc:
            raise GenericEffectError() from exc
        written = staging.length

    logger.debug("staged %d bytes in %d chunks (reversed)", written, chunks)
    return written


def finalize(ctx: PipelineContext) -> int:
    """Write the canonical header and copy staging into the output file.

    Returns the size of the finished output file.
    """
    try:
        staging = AudioStream.open_read(ctx.staging_path)
    except OSError as exc:
        raise GenericEffectError("Could not open temporary DSP file.") from exc

    with staging:
        try:
            output = AudioStream.create(ctx.output_path)
        except OSError as exc:
            raise GenericEffectError("Could not create output file.") from exc

        with output:
            try:
                output.write_at(0, synthesize_header(staging.length, ctx.format))
                position = 0
                while position < staging.length:
                    output.append(staging.read_at(position, ctx.layout.bytes))
                    position += ctx.layout.bytes
            except (OSError, ValueError) as exc:
                raise GenericEffectError() from exc
            size = output.length

    logger.debug("wrote %s (%d bytes)", ctx.output_path, size)
    return size
