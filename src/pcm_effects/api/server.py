"""HTTP endpoints for inspecting WAV files and running effects on local paths."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import replace
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from pcm_effects.api.schemas import (
    EffectInfo,
    EffectListResponse,
    InspectRequest,
    InspectResponse,
    ParameterInfo,
    RunEffectRequest,
    RunEffectResponse,
)
from pcm_effects.audio.wav_header import read_header
from pcm_effects.effects.models import EffectResult
from pcm_effects.effects.params import EFFECT_SPECS
from pcm_effects.effects.service import AudioEffect
from pcm_effects.errors import EffectError, ErrorKind, GenericEffectError
from pcm_effects.settings import EffectSettings

logger = logging.getLogger(__name__)


def _error_detail(kind: ErrorKind | None, message: str) -> dict[str, str]:
    return {"error": (kind or ErrorKind.GENERIC).value, "message": message}


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove staging file %s: %s", path, exc)


def _request_settings(base: EffectSettings) -> EffectSettings:
    """Copy of ``base`` with a staging file of its own, beside the configured one."""
    staging = base.staging_path
    try:
        handle = tempfile.NamedTemporaryFile(
            dir=staging.parent, prefix=f"{staging.stem or 'staging'}-", suffix=".raw", delete=False
        )
    except OSError as exc:
        raise GenericEffectError("Could not create temporary DSP file.") from exc
    handle.close()
    return replace(base, staging_path=Path(handle.name))


def create_app(settings: EffectSettings | None = None) -> FastAPI:
    app = FastAPI(title="pcm-effects API", version="0.1.0")
    effect_settings = settings or EffectSettings.from_env()

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "service": "pcm-effects API",
            "status": "ok",
            "docs": "/docs",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon() -> Response:
        return Response(status_code=204)

    @app.get("/v1/effects", response_model=EffectListResponse)
    def list_effects() -> EffectListResponse:
        return EffectListResponse(
            effects=[
                EffectInfo(
                    effect=spec.effect_type.value,
                    description=spec.description,
                    parameters=[
                        ParameterInfo(
                            param_id=param.param_id,
                            default=param.default,
                            minimum=param.minimum,
                            maximum=param.maximum,
                            description=param.description,
                        )
                        for param in spec.parameters
                    ],
                )
                for spec in EFFECT_SPECS.values()
            ]
        )

    @app.post("/v1/wav/inspect", response_model=InspectResponse)
    def inspect_wav(payload: InspectRequest) -> InspectResponse:
        try:
            header = read_header(payload.input_path)
        except EffectError as exc:
            raise HTTPException(status_code=400, detail=_error_detail(exc.kind, exc.message)) from exc

        fmt = header.format
        return InspectResponse(
            input_path=payload.input_path,
            sample_rate=fmt.sample_rate,
            bit_depth=fmt.bit_depth,
            channels=fmt.channels,
            data_begin=header.region.begin,
            data_end=header.region.end,
            frame_count=header.region.length // fmt.block_align,
        )

    @app.post("/v1/effects/run", response_model=RunEffectResponse)
    def run_effect(payload: RunEffectRequest) -> RunEffectResponse:
        # requests run concurrently in the threadpool; none may share a staging file
        try:
            request_settings = _request_settings(effect_settings)
        except EffectError as exc:
            raise HTTPException(status_code=400, detail=_error_detail(exc.kind, exc.message)) from exc

        audio = AudioEffect(payload.effect, payload.input_path, payload.output_path, settings=request_settings)
        try:
            result: EffectResult = audio.initialize()
            if result.success and payload.depth is not None:
                result = audio.configure(depth=payload.depth)
            if result.success:
                result = audio.run()
        finally:
            if not request_settings.keep_staging:
                _discard(request_settings.staging_path)
        if not result.success:
            raise HTTPException(status_code=400, detail=_error_detail(result.error, result.message))

        return RunEffectResponse(
            success=True,
            effect=payload.effect,
            message=result.message,
            output_path=str(audio.output_path),
            sample_rate=audio.sample_rate,
            bit_depth=audio.bit_depth,
            channels=audio.channels,
        )

    return app


app = create_app()
