"""Effect kinds, run status and run results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pcm_effects.errors import EffectError, ErrorKind


class EffectKind(str, Enum):
    BITCRUSH = "bitcrush"
    CHANNEL_SUBTRACT = "channelsubtract"
    CHANNEL_SWAP = "channelswap"
    REVERSE = "reverse"


class EffectStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class EffectResult:
    success: bool
    message: str = ""
    error: ErrorKind | None = None

    @staticmethod
    def ok(message: str = "") -> EffectResult:
        return EffectResult(success=True, message=message)

    @staticmethod
    def failed(exc: EffectError) -> EffectResult:
        return EffectResult(success=False, message=exc.message, error=exc.kind)

    def __bool__(self) -> bool:
        return self.success
