"""Per-effect parameter specs and validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from pcm_effects.effects.models import EffectKind
from pcm_effects.errors import InvalidParameterError


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    param_id: str
    default: int
    minimum: int
    maximum: int
    description: str = ""


@dataclass(frozen=True, slots=True)
class EffectSpec:
    effect_type: EffectKind
    description: str
    parameters: tuple[ParameterSpec, ...] = ()


EFFECT_SPECS: dict[EffectKind, EffectSpec] = {
    EffectKind.BITCRUSH: EffectSpec(
        effect_type=EffectKind.BITCRUSH,
        description="Zero the least significant bits of every sample.",
        parameters=(ParameterSpec("depth", 0, 0, 255, "number of low bits to clear"),),
    ),
    EffectKind.CHANNEL_SUBTRACT: EffectSpec(
        effect_type=EffectKind.CHANNEL_SUBTRACT,
        description="Remove the component shared by all channels (center removal).",
    ),
    EffectKind.CHANNEL_SWAP: EffectSpec(
        effect_type=EffectKind.CHANNEL_SWAP,
        description="Reverse the channel order inside every frame.",
    ),
    EffectKind.REVERSE: EffectSpec(
        effect_type=EffectKind.REVERSE,
        description="Play the audio backwards.",
    ),
}


def default_params(effect_type: EffectKind) -> dict[str, int]:
    return {param.param_id: param.default for param in EFFECT_SPECS[effect_type].parameters}


def validate_params(effect_type: EffectKind, params: Mapping[str, object]) -> dict[str, int]:
    spec = EFFECT_SPECS[effect_type]
    known = {param.param_id: param for param in spec.parameters}
    values = default_params(effect_type)
    for param_id, raw in params.items():
        param = known.get(param_id)
        if param is None:
            raise InvalidParameterError(f"Unknown parameter '{param_id}' for effect '{effect_type.value}'.")
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise InvalidParameterError(f"Parameter '{param_id}' must be an integer.")
        if raw < param.minimum or raw > param.maximum:
            raise InvalidParameterError(
                f"Parameter '{param_id}' must be between {param.minimum} and {param.maximum}."
            )
        values[param_id] = raw
    return values
