"""Streaming sample-domain effects for integer PCM WAV files."""

from pcm_effects.effects import AudioEffect, EffectKind, EffectResult, Effects, run_effect
from pcm_effects.errors import EffectError, ErrorKind

__all__ = [
    "AudioEffect",
    "EffectError",
    "EffectKind",
    "EffectResult",
    "Effects",
    "ErrorKind",
    "run_effect",
]
