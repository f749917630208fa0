import asyncio
import wave
from pathlib import Path

import httpx
from fastapi.testclient import TestClient

from pcm_effects.api.server import create_app
from pcm_effects.audio.codec import decode_samples, encode_samples
from pcm_effects.settings import EffectSettings


def _write_test_wav(path: Path, samples: list[int], channels: int = 2) -> None:
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(48_000)
        wav.writeframes(encode_samples(samples, 16))


def _settings(tmp_path: Path) -> EffectSettings:
    return EffectSettings(staging_path=tmp_path / "temp.raw", default_output_path=tmp_path / "output.wav")


def _client(tmp_path: Path) -> TestClient:
    return TestClient(create_app(_settings(tmp_path)))


def test_root_and_favicon_endpoints(tmp_path: Path) -> None:
    client = _client(tmp_path)

    root_response = client.get("/")
    assert root_response.status_code == 200
    assert root_response.json()["status"] == "ok"
    assert root_response.json()["docs"] == "/docs"

    favicon_response = client.get("/favicon.ico")
    assert favicon_response.status_code == 204


def test_list_effects_includes_bitcrush_depth(tmp_path: Path) -> None:
    response = _client(tmp_path).get("/v1/effects")
    body = response.json()

    assert response.status_code == 200
    names = {item["effect"] for item in body["effects"]}
    assert names == {"bitcrush", "channelsubtract", "channelswap", "reverse"}
    bitcrush = next(item for item in body["effects"] if item["effect"] == "bitcrush")
    assert bitcrush["parameters"][0]["param_id"] == "depth"
    assert bitcrush["parameters"][0]["maximum"] == 255


def test_inspect_returns_format(tmp_path: Path) -> None:
    src = tmp_path / "in.wav"
    _write_test_wav(src, list(range(20)))

    response = _client(tmp_path).post("/v1/wav/inspect", json={"input_path": str(src)})
    body = response.json()

    assert response.status_code == 200
    assert body["sample_rate"] == 48_000
    assert body["bit_depth"] == 16
    assert body["channels"] == 2
    assert body["data_begin"] == 44
    assert body["frame_count"] == 10


def test_inspect_rejects_unsupported_extension(tmp_path: Path) -> None:
    response = _client(tmp_path).post("/v1/wav/inspect", json={"input_path": str(tmp_path / "a.ogg")})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "unsupported_file_extension"


def test_run_effect_endpoint_writes_output(tmp_path: Path) -> None:
    src = tmp_path / "in.wav"
    dst = tmp_path / "out.wav"
    _write_test_wav(src, [0x1234, 0x0FFF, -1, 7])

    response = _client(tmp_path).post(
        "/v1/effects/run",
        json={"effect": "bitcrush", "input_path": str(src), "output_path": str(dst), "depth": 4},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["output_path"] == str(dst)
    assert body["channels"] == 2
    assert decode_samples(dst.read_bytes()[44:], 16) == [0x1230, 0x0FF0, -16, 0]


def test_run_effect_reports_effect_errors(tmp_path: Path) -> None:
    src = tmp_path / "mono.wav"
    _write_test_wav(src, [1, 2, 3], channels=1)
    client = _client(tmp_path)

    response = client.post("/v1/effects/run", json={"effect": "channelswap", "input_path": str(src)})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "unsupported_channel_layout"

    response = client.post("/v1/effects/run", json={"effect": "bitcrush", "input_path": str(src), "depth": 15})
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Bit crush exceeds sample limit."


def test_run_effect_rejects_invalid_payload(tmp_path: Path) -> None:
    client = _client(tmp_path)

    response = client.post("/v1/effects/run", json={"effect": "echo", "input_path": "a.wav"})
    assert response.status_code == 422

    response = client.post("/v1/effects/run", json={"effect": "bitcrush", "input_path": "a.wav", "depth": 256})
    assert response.status_code == 422


def test_concurrent_runs_keep_their_own_audio(tmp_path: Path) -> None:
    frames = 20_000
    jobs = {}
    for name, value in (("a", 1), ("b", 2), ("c", 3)):
        src = tmp_path / f"{name}.wav"
        _write_test_wav(src, [value, -value] * frames)
        jobs[name] = (src, tmp_path / f"out_{name}.wav", value)

    app = create_app(_settings(tmp_path))

    async def run_all() -> list[httpx.Response]:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            return await asyncio.gather(
                *(
                    client.post(
                        "/v1/effects/run",
                        json={"effect": "channelswap", "input_path": str(src), "output_path": str(dst)},
                    )
                    for src, dst, _value in jobs.values()
                )
            )

    responses = asyncio.run(run_all())

    assert [response.status_code for response in responses] == [200, 200, 200]
    for _src, dst, value in jobs.values():
        assert decode_samples(dst.read_bytes()[44:], 16) == [-value, value] * frames
    assert not list(tmp_path.glob("*.raw"))


def test_run_effect_removes_staging_after_failure(tmp_path: Path) -> None:
    src = tmp_path / "in.wav"
    _write_test_wav(src, [1, 2, 3, 4])
    response = _client(tmp_path).post(
        "/v1/effects/run",
        json={"effect": "reverse", "input_path": str(src), "output_path": str(tmp_path / "no-dir" / "out.wav")},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Could not create output file."
    assert not list(tmp_path.glob("*.raw"))
