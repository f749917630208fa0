"""FastAPI request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

EffectName = Literal["bitcrush", "channelsubtract", "channelswap", "reverse"]


class ParameterInfo(BaseModel):
    param_id: str
    default: int
    minimum: int
    maximum: int
    description: str


class EffectInfo(BaseModel):
    effect: EffectName
    description: str
    parameters: list[ParameterInfo]


class EffectListResponse(BaseModel):
    effects: list[EffectInfo]


class InspectRequest(BaseModel):
    input_path: str = Field(min_length=1)


class InspectResponse(BaseModel):
    input_path: str
    sample_rate: int
    bit_depth: int
    channels: int
    data_begin: int
    data_end: int
    frame_count: int


class RunEffectRequest(BaseModel):
    effect: EffectName
    input_path: str = Field(min_length=1)
    output_path: str | None = None
    depth: int | None = Field(default=None, ge=0, le=255)


class RunEffectResponse(BaseModel):
    success: bool
    effect: EffectName
    message: str
    output_path: str
    sample_rate: int
    bit_depth: int
    channels: int
