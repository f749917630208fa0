"""Effect domain public exports."""

from pcm_effects.effects.facade import Effects, run_effect
from pcm_effects.effects.models import EffectKind, EffectResult, EffectStatus
from pcm_effects.effects.params import EFFECT_SPECS, EffectSpec, ParameterSpec
from pcm_effects.effects.service import AudioEffect
from pcm_effects.effects.transforms import TRANSFORMS, channel_subtract, channel_swap, make_bitcrush, reverse_frames

__all__ = [
    "AudioEffect",
    "EFFECT_SPECS",
    "EffectKind",
    "EffectResult",
    "EffectSpec",
    "EffectStatus",
    "Effects",
    "ParameterSpec",
    "TRANSFORMS",
    "channel_subtract",
    "channel_swap",
    "make_bitcrush",
    "reverse_frames",
    "run_effect",
]
