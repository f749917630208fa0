"""Per-buffer sample transforms and the effect dispatch table.

Every transform takes the decoded samples of one buffer (interleaved,
``channels`` samples per frame) and returns a new list of the same length.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from pcm_effects.audio.pipeline import SampleTransform
from pcm_effects.audio.wav_header import FormatDescriptor
from pcm_effects.effects.models import EffectKind
from pcm_effects.errors import InvalidParameterError

Traversal = Literal["forward", "reverse"]
TransformFactory = Callable[[FormatDescriptor, int], SampleTransform]


def bitcrush_limit(fmt: FormatDescriptor) -> int:
    """Smallest depth that is rejected: 15 for 16-bit, 23 for 24-bit."""
    return fmt.bit_depth - 1


def bitcrush_mask(depth: int, fmt: FormatDescriptor) -> int:
    if depth < 0 or depth >= bitcrush_limit(fmt):
        raise InvalidParameterError("Bit crush exceeds sample limit.")
    return (1 << depth) - 1


def make_bitcrush(depth: int, fmt: FormatDescriptor) -> SampleTransform:
    keep = ~bitcrush_mask(depth, fmt)

    def bitcrush(samples: list[int], _fmt: FormatDescriptor) -> list[int]:
        return [sample & keep for sample in samples]

    return bitcrush


def channel_subtract(samples: list[int], fmt: FormatDescriptor) -> list[int]:
    channels = fmt.channels
    low = fmt.sample_min
    high = fmt.sample_max
    out = [0] * len(samples)
    for start in range(0, len(samples) - len(samples) % channels, channels):
        frame = samples[start : start + channels]
        mono = sum(frame)
        for channel, sample in enumerate(frame):
            value = _div_trunc(sample * channels - mono, channels)
            out[start + channel] = min(max(value, low), high)
    return out


def _div_trunc(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def channel_swap(samples: list[int], fmt: FormatDescriptor) -> list[int]:
    channels = fmt.channels
    out = list(samples)
    for start in range(0, len(samples) - len(samples) % channels, channels):
        out[start : start + channels] = samples[start : start + channels][::-1]
    return out


def reverse_frames(samples: list[int], fmt: FormatDescriptor) -> list[int]:
    channels = fmt.channels
    frame_count = len(samples) // channels
    out: list[int] = []
    for frame in range(frame_count - 1, -1, -1):
        out.extend(samples[frame * channels : (frame + 1) * channels])
    return out


def _fixed(transform: SampleTransform) -> TransformFactory:
    def factory(_fmt: FormatDescriptor, _depth: int) -> SampleTransform:
        return transform

    return factory


def _bitcrush_factory(fmt: FormatDescriptor, depth: int) -> SampleTransform:
    return make_bitcrush(depth, fmt)


@dataclass(frozen=True, slots=True)
class EffectTransform:
    kind: EffectKind
    traversal: Traversal
    min_channels: int
    factory: TransformFactory

    def build(self, fmt: FormatDescriptor, depth: int = 0) -> SampleTransform:
        return self.factory(fmt, depth)


TRANSFORMS: dict[EffectKind, EffectTransform] = {
    EffectKind.BITCRUSH: EffectTransform(EffectKind.BITCRUSH, "forward", min_channels=1, factory=_bitcrush_factory),
    EffectKind.CHANNEL_SUBTRACT: EffectTransform(
        EffectKind.CHANNEL_SUBTRACT, "forward", min_channels=2, factory=_fixed(channel_subtract)
    ),
    EffectKind.CHANNEL_SWAP: EffectTransform(
        EffectKind.CHANNEL_SWAP, "forward", min_channels=2, factory=_fixed(channel_swap)
    ),
    EffectKind.REVERSE: EffectTransform(EffectKind.REVERSE, "reverse", min_channels=1, factory=_fixed(reverse_frames)),
}
