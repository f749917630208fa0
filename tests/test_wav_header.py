import wave
from pathlib import Path

import pytest

from pcm_effects.audio.codec import encode_samples
from pcm_effects.audio.wav_header import (
    CANONICAL_HEADER_SIZE,
    FormatDescriptor,
    check_extension,
    parse_header,
    read_header,
    synthesize_header,
)
from pcm_effects.errors import (
    BrokenHeaderError,
    FormatNotSupportedError,
    NoSuchFileError,
    UnsupportedFileExtensionError,
)


def _chunk(tag: bytes, body: bytes) -> bytes:
    return tag + len(body).to_bytes(4, "little") + body


def _fmt_body(channels: int, sample_rate: int, bit_depth: int, format_tag: int = 1) -> bytes:
    block = channels * (bit_depth // 8)
    return (
        format_tag.to_bytes(2, "little")
        + channels.to_bytes(2, "little")
        + sample_rate.to_bytes(4, "little")
        + (sample_rate * block).to_bytes(4, "little")
        + block.to_bytes(2, "little")
        + bit_depth.to_bytes(2, "little")
    )


def _riff(*chunks: bytes) -> bytes:
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + len(body).to_bytes(4, "little") + body


def _write_test_wav(path: Path, channels: int = 2, sample_width: int = 2, frames: int = 16) -> None:
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(48_000)
        size = frames * channels * sample_width
        wav.writeframes((bytes(range(256)) * (size // 256 + 1))[:size])


def test_parse_canonical_header_written_by_wave_module(tmp_path: Path) -> None:
    path = tmp_path / "in.wav"
    _write_test_wav(path, channels=2, sample_width=2, frames=16)

    header = parse_header(path.read_bytes())
    assert header.format == FormatDescriptor(sample_rate=48_000, bit_depth=16, channels=2)
    assert header.region.begin == 44
    assert header.region.length == 16 * 2 * 2
    assert header.fmt_offset == 12
    assert header.data_offset == 36


def test_parse_skips_list_chunk_before_fmt() -> None:
    payload = encode_samples([1, 2, 3, 4], 16)
    data = _riff(
        _chunk(b"LIST", b"INFOISFT" + (14).to_bytes(4, "little") + b"some encoder\x00\x00"),
        _chunk(b"fmt ", _fmt_body(2, 44_100, 16)),
        _chunk(b"data", payload),
    )

    header = parse_header(data)
    assert header.format.sample_rate == 44_100
    assert header.format.channels == 2
    assert header.format.bit_depth == 16
    assert data[header.region.begin : header.region.end] == payload


def test_parse_skips_chunks_between_fmt_and_data_and_extended_fmt() -> None:
    payload = encode_samples([7, -7, 9], 24)
    fmt_body = _fmt_body(1, 96_000, 24) + b"\x00\x00"
    data = _riff(
        _chunk(b"fmt ", fmt_body),
        _chunk(b"fact", (3).to_bytes(4, "little")),
        _chunk(b"data", payload),
    )

    header = parse_header(data)
    assert header.format == FormatDescriptor(sample_rate=96_000, bit_depth=24, channels=1)
    assert header.region.length == 9
    assert data[header.region.begin : header.region.end] == payload


@pytest.mark.parametrize("broken", [b"RIFX" + b"\x00" * 40, b"RIFF\x00\x00\x00\x00AVI " + b"\x00" * 40, b""])
def test_parse_rejects_bad_signature(broken: bytes) -> None:
    with pytest.raises(BrokenHeaderError):
        parse_header(broken)


def test_parse_fails_when_fmt_is_missing() -> None:
    with pytest.raises(BrokenHeaderError):
        parse_header(_riff(_chunk(b"data", b"\x00" * 8)))


def test_parse_fails_when_data_is_missing() -> None:
    with pytest.raises(BrokenHeaderError):
        parse_header(_riff(_chunk(b"fmt ", _fmt_body(2, 44_100, 16))))


def test_parse_rejects_empty_data_chunk() -> None:
    with pytest.raises(BrokenHeaderError):
        parse_header(_riff(_chunk(b"fmt ", _fmt_body(2, 44_100, 16)), _chunk(b"data", b"")))


def test_parse_rejects_non_pcm_format_code() -> None:
    data = _riff(_chunk(b"fmt ", _fmt_body(2, 44_100, 32, format_tag=3)), _chunk(b"data", b"\x00" * 8))
    with pytest.raises(FormatNotSupportedError):
        parse_header(data)


@pytest.mark.parametrize("bit_depth", [8, 32])
def test_parse_rejects_unsupported_bit_depth(bit_depth: int) -> None:
    data = _riff(_chunk(b"fmt ", _fmt_body(2, 44_100, bit_depth)), _chunk(b"data", b"\x00" * 8))
    with pytest.raises(FormatNotSupportedError):
        parse_header(data)


def test_synthesize_canonical_header() -> None:
    fmt = FormatDescriptor(sample_rate=44_100, bit_depth=24, channels=2)
    header = synthesize_header(600, fmt)

    assert len(header) == CANONICAL_HEADER_SIZE
    assert header[0:4] == b"RIFF"
    assert int.from_bytes(header[4:8], "little") == 636
    assert header[8:16] == b"WAVEfmt "
    assert int.from_bytes(header[16:20], "little") == 16
    assert int.from_bytes(header[20:22], "little") == 1
    assert int.from_bytes(header[22:24], "little") == 2
    assert int.from_bytes(header[24:28], "little") == 44_100
    assert int.from_bytes(header[28:32], "little") == 44_100 * 6
    assert int.from_bytes(header[32:34], "little") == 6
    assert int.from_bytes(header[34:36], "little") == 24
    assert header[36:40] == b"data"
    assert int.from_bytes(header[40:44], "little") == 600

    parsed = parse_header(header + b"\x00" * 600)
    assert parsed.format == fmt
    assert (parsed.region.begin, parsed.region.end) == (44, 644)


def test_check_extension_is_case_insensitive() -> None:
    check_extension("song.wav")
    check_extension("SONG.WAV")
    check_extension(Path("dir") / "take.Wav")
    check_extension(Path("dir") / ".wav")
    for bad in ["song.mp3", "song.wav.bak", ".wav", "wav", ".WAV"]:
        with pytest.raises(UnsupportedFileExtensionError):
            check_extension(bad)


def test_read_header_checks_extension_before_opening(tmp_path: Path) -> None:
    with pytest.raises(UnsupportedFileExtensionError):
        read_header(tmp_path / "missing.flac")
    with pytest.raises(NoSuchFileError):
        read_header(tmp_path / "missing.wav")


def test_read_header_clamps_region_to_file_size(tmp_path: Path) -> None:
    path = tmp_path / "truncated.wav"
    payload = encode_samples(list(range(8)), 16)
    path.write_bytes(synthesize_header(1000, FormatDescriptor(8_000, 16, 1)) + payload)

    header = read_header(path)
    assert header.region.begin == 44
    assert header.region.end == 44 + len(payload)
