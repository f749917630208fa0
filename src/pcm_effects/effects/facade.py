"""Public one-call API for collaborators (CLI, HTTP, scripts)."""

from __future__ import annotations

from pathlib import Path

from pcm_effects.effects.models import EffectKind, EffectResult
from pcm_effects.effects.service import AudioEffect
from pcm_effects.settings import EffectSettings


def run_effect(
    effect: EffectKind | str,
    input_path: str | Path,
    output_path: str | Path | None = None,
    settings: EffectSettings | None = None,
    **params: object,
) -> EffectResult:
    audio = AudioEffect(effect, input_path, output_path, settings=settings)
    result = audio.initialize()
    if not result.success:
        return result
    if params:
        result = audio.configure(**params)
        if not result.success:
            return result
    return audio.run()


class Effects:
    def __init__(self, settings: EffectSettings | None = None) -> None:
        self._settings = settings or EffectSettings.from_env()

    def bitcrush(self, input_path: str | Path, output_path: str | Path | None = None, depth: int = 0) -> EffectResult:
        return run_effect(EffectKind.BITCRUSH, input_path, output_path, settings=self._settings, depth=depth)

    def channel_subtract(self, input_path: str | Path, output_path: str | Path | None = None) -> EffectResult:
        return run_effect(EffectKind.CHANNEL_SUBTRACT, input_path, output_path, settings=self._settings)

    def channel_swap(self, input_path: str | Path, output_path: str | Path | None = None) -> EffectResult:
        return run_effect(EffectKind.CHANNEL_SWAP, input_path, output_path, settings=self._settings)

    def reverse(self, input_path: str | Path, output_path: str | Path | None = None) -> EffectResult:
        return run_effect(EffectKind.REVERSE, input_path, output_path, settings=self._settings)
