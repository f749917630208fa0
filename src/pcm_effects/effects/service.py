"""Effect object with Initialize -> Configure -> Run flow."""

from __future__ import annotations

import logging
from pathlib import Path

from pcm_effects.audio.pipeline import (
    BUFFER_SIZE_FRAMES,
    BufferLayout,
    PipelineContext,
    finalize,
    stream_reverse,
    stream_transform,
)
from pcm_effects.audio.wav_header import WavHeader, read_header
from pcm_effects.effects.models import EffectKind, EffectResult, EffectStatus
from pcm_effects.effects.params import default_params, validate_params
from pcm_effects.effects.transforms import TRANSFORMS, bitcrush_mask
from pcm_effects.errors import (
    DEFAULT_ERROR_MESSAGES,
    EffectError,
    ErrorKind,
    InvalidParameterError,
    UninitializedError,
    UnsupportedChannelLayoutError,
)
from pcm_effects.settings import EffectSettings

logger = logging.getLogger(__name__)


class AudioEffect:
    """One effect applied to one input file.

    ``initialize()`` reads and validates the input header, ``configure()``
    sets effect parameters (bit crush depth) and ``run()`` streams the audio
    through the transform into a staging file, then assembles the output.
    Every step returns an ``EffectResult``; the last failure text is also
    available from ``last_error_message()``.
    """

    def __init__(
        self,
        kind: EffectKind | str,
        input_path: str | Path = "",
        output_path: str | Path | None = None,
        settings: EffectSettings | None = None,
        frames_per_buffer: int = BUFFER_SIZE_FRAMES,
    ) -> None:
        self.kind = EffectKind(kind)
        self._settings = settings or EffectSettings.from_env()
        self.input_path = Path(input_path)
        self.output_path = Path(output_path) if output_path else self._settings.default_output_path
        self._frames_per_buffer = frames_per_buffer
        self._status = EffectStatus.UNINITIALIZED
        self._header: WavHeader | None = None
        self._layout: BufferLayout | None = None
        self._params: dict[str, int] = default_params(self.kind)
        self._last_error: ErrorKind | None = None
        self._last_message = ""

    @property
    def status(self) -> EffectStatus:
        return self._status

    @property
    def header(self) -> WavHeader | None:
        return self._header

    @property
    def params(self) -> dict[str, int]:
        return dict(self._params)

    @property
    def sample_rate(self) -> int:
        return self._header.format.sample_rate if self._header else 0

    @property
    def bit_depth(self) -> int:
        return self._header.format.bit_depth if self._header else 0

    @property
    def channels(self) -> int:
        return self._header.format.channels if self._header else 0

    @property
    def last_error(self) -> ErrorKind | None:
        return self._last_error

    def last_error_message(self) -> str:
        if self._last_message:
            return self._last_message
        if self._status is EffectStatus.UNINITIALIZED:
            return DEFAULT_ERROR_MESSAGES[ErrorKind.UNINITIALIZED]
        return ""

    def initialize(self) -> EffectResult:
        self._status = EffectStatus.UNINITIALIZED
        self._header = None
        self._layout = None
        try:
            header = read_header(self.input_path)
            self._check_paths()
        except EffectError as exc:
            return self._fail(exc)

        self._header = header
        self._layout = BufferLayout.for_format(header.format, self._frames_per_buffer)
        self._params = default_params(self.kind)
        self._status = EffectStatus.INITIALIZED
        self._clear_error()
        fmt = header.format
        logger.info(
            "initialized %s: %s (%d Hz, %d-bit, %d ch, %d payload bytes)",
            self.kind.value,
            self.input_path,
            fmt.sample_rate,
            fmt.bit_depth,
            fmt.channels,
            header.region.length,
        )
        return EffectResult.ok()

    def configure(self, **params: object) -> EffectResult:
        if self._header is None:
            return self._fail(UninitializedError())
        try:
            values = validate_params(self.kind, params)
            if self.kind is EffectKind.BITCRUSH:
                bitcrush_mask(values["depth"], self._header.format)
        except EffectError as exc:
            return self._fail(exc)

        self._params = values
        self._clear_error()
        logger.debug("configured %s with %s", self.kind.value, values)
        return EffectResult.ok()

    def run(self) -> EffectResult:
        if self._header is None or self._layout is None:
            return self._fail(UninitializedError())

        entry = TRANSFORMS[self.kind]
        fmt = self._header.format
        if fmt.channels < entry.min_channels:
            return self._fail(UnsupportedChannelLayoutError())

        ctx = PipelineContext(
            input_path=self.input_path,
            staging_path=self._settings.staging_path,
            output_path=self.output_path,
            header=self._header,
            layout=self._layout,
        )
        logger.info("DSP started: %s -> %s", self.input_path, self.output_path)
        try:
            transform = entry.build(fmt, depth=self._params.get("depth", 0))
            walk = stream_reverse if entry.traversal == "reverse" else stream_transform
            staged = walk(ctx, transform, on_staging=self._enter_running)
            written = finalize(ctx)
        except EffectError as exc:
            self._status = EffectStatus.FAILED
            return self._fail(exc)

        if not self._settings.keep_staging:
            self._remove_staging()
        self._status = EffectStatus.DONE
        self._clear_error()
        logger.info("DSP finished: %d payload bytes, %d bytes written", staged, written)
        return EffectResult.ok(f"Wrote {written} bytes to {self.output_path}.")

    def _enter_running(self) -> None:
        self._status = EffectStatus.RUNNING

    def _check_paths(self) -> None:
        source = self.input_path.resolve()
        target = self.output_path.resolve()
        staging = self._settings.staging_path.resolve()
        if target == source:
            raise InvalidParameterError("Output file must differ from the input file.")
        if staging in {source, target}:
            raise InvalidParameterError("File path collides with the temporary DSP file.")

    def _remove_staging(self) -> None:
        try:
            self._settings.staging_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not remove staging file %s: %s", self._settings.staging_path, exc)

    def _fail(self, exc: EffectError) -> EffectResult:
        self._last_error = exc.kind
        self._last_message = exc.message
        logger.warning("%s failed: %s", self.kind.value, exc.message)
        return EffectResult.failed(exc)

    def _clear_error(self) -> None:
        self._last_error = None
        self._last_message = ""
