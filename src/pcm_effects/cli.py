"""Command line entry point: ``pcm-effects <effect> [-i IN] [-o OUT] [--depth N]``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from pcm_effects.effects.models import EffectKind
from pcm_effects.effects.service import AudioEffect
from pcm_effects.settings import EffectSettings

Prompt = Callable[[str], str]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments; paths and depth left out are prompted for later."""
    parser = argparse.ArgumentParser(description="Apply a sample-domain effect to a PCM WAV file")
    parser.add_argument(
        "effect",
        type=str.lower,
        choices=[kind.value for kind in EffectKind],
        help="Effect to apply",
    )
    parser.add_argument("-i", "--input", default=None, help="Input WAV file")
    parser.add_argument("-o", "--output", default=None, help="Output WAV file")
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Bit crush level: number of low bits to clear (bitcrush only)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level to use (defaults to PCM_EFFECTS_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


def _parse_depth(raw: str) -> int | None:
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    if value < 0 or value > 255:
        return None
    return value


def run(
    argv: Sequence[str] | None = None,
    prompt: Prompt = input,
    settings: EffectSettings | None = None,
) -> int:
    args = parse_args(argv)
    effect_settings = settings or EffectSettings.from_env()
    logging.basicConfig(level=getattr(logging, args.log_level or effect_settings.log_level))

    kind = EffectKind(args.effect)
    input_path = args.input or prompt("Enter input file directory: ").strip()
    output_path = args.output or prompt("Enter output file directory: ").strip()

    depth: int | None = None
    if kind is EffectKind.BITCRUSH:
        depth = args.depth if args.depth is not None else _parse_depth(prompt("Enter bit crush level: "))
        if depth is None or depth < 0 or depth > 255:
            print("Error: invalid value for bit crush entered")
            return 2
    elif args.depth is not None:
        print(f"Error: --depth is not used by {kind.value}")
        return 2

    audio = AudioEffect(kind, input_path, output_path or None, settings=effect_settings)
    result = audio.initialize()
    if result.success and depth is not None:
        result = audio.configure(depth=depth)
    if not result.success:
        print("Error occurred:")
        print(result.message)
        return 1

    print("DSP Started...")
    result = audio.run()
    if not result.success:
        print("DSP Failed.")
        print(result.message)
        return 1

    print("DSP Finished.")
    return 0


def main() -> int:
    """Run the CLI."""
    return run(sys.argv[1:])


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
