"""WAV container handling and the buffered streaming pipeline."""

from pcm_effects.audio.pipeline import (
    BUFFER_SIZE_FRAMES,
    BufferLayout,
    PipelineContext,
    finalize,
    stream_reverse,
    stream_transform,
)
from pcm_effects.audio.stream import AudioStream
from pcm_effects.audio.wav_header import (
    AudioRegion,
    FormatDescriptor,
    WavHeader,
    check_extension,
    parse_header,
    read_header,
    synthesize_header,
)

__all__ = [
    "BUFFER_SIZE_FRAMES",
    "AudioRegion",
    "AudioStream",
    "BufferLayout",
    "FormatDescriptor",
    "PipelineContext",
    "WavHeader",
    "check_extension",
    "finalize",
    "parse_header",
    "read_header",
    "stream_reverse",
    "stream_transform",
    "synthesize_header",
]
