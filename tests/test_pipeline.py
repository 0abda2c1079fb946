import json

import pytest
from PIL import Image

from pixelweave.config import Settings
from pixelweave.errors import (
    CapacityExceededError,
    DecodeError,
    FormatMismatchError,
    PipelineState,
)
from pixelweave.services import pipeline
from pixelweave.services.pipeline import combine_files, run_job
from pixelweave.services.status_store import read_status

BLUE = (0, 0, 255, 255)
RED = (255, 0, 0, 255)


def test_combine_alternates_pixels(make_image, settings, tmp_path):
    a = make_image("a.png", (4, 4), BLUE[:3])
    b = make_image("b.png", (2, 2), RED[:3])
    out = tmp_path / "out.png"
    states = []

    result = combine_files(a, b, out, settings=settings, on_state=states.append)

    assert states == [
        PipelineState.LOADED,
        PipelineState.FORMAT_CHECKED,
        PipelineState.SIZE_RECONCILED,
        PipelineState.INTERLEAVED,
        PipelineState.ENCODED,
    ]
    assert (result.width, result.height) == (2, 2)
    assert result.resized_first and not result.resized_second
    assert result.byte_length == 16
    assert result.format == "PNG"
    assert [r["filename"] for r in result.inputs["images"]] == ["a.png", "b.png"]
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.convert("RGBA").tobytes() == bytes(BLUE + RED + BLUE + RED)


def test_round_trip_keeps_dimensions_and_length(make_image, settings, tmp_path):
    a = make_image("a.png", (3, 2), (1, 1, 1))
    b = make_image("b.png", (6, 5), (2, 2, 2))
    out = tmp_path / "out.png"
    result = combine_files(a, b, out, settings=settings)
    with Image.open(out) as img:
        assert img.size == (3, 2)
        assert len(img.convert("RGBA").tobytes()) == result.byte_length == 24


def test_format_mismatch_stops_before_interleaving(make_image, settings, tmp_path, monkeypatch):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    b = make_image("b.jpg", (2, 2), (0, 0, 0), fmt="JPEG")

    def boom(*args):
        raise AssertionError("interleave must not run")

    monkeypatch.setattr(pipeline, "interleave", boom)
    out = tmp_path / "out.png"
    with pytest.raises(FormatMismatchError) as info:
        combine_files(a, b, out, settings=settings)
    assert info.value.stage is PipelineState.LOADED
    assert not out.exists()


def test_capacity_exceeded_writes_nothing(make_image, tmp_path):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    b = make_image("b.png", (2, 2), (9, 9, 9))
    out = tmp_path / "out.png"
    with pytest.raises(CapacityExceededError) as info:
        combine_files(a, b, out, settings=Settings(max_pixels=3))
    assert info.value.stage is PipelineState.INTERLEAVED
    assert not out.exists()


def test_capacity_exactly_reached(make_image, tmp_path):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    b = make_image("b.png", (2, 2), (9, 9, 9))
    result = combine_files(a, b, tmp_path / "out.png", settings=Settings(max_pixels=4))
    assert result.byte_length == 16


def test_jpeg_round_trip(make_image, settings, tmp_path):
    a = make_image("a.jpg", (6, 4), (0, 0, 0), fmt="JPEG")
    b = make_image("b.jpg", (3, 2), (9, 9, 9), fmt="JPEG")
    out = tmp_path / "out.jpg"
    result = combine_files(a, b, out, settings=settings)
    assert result.format == "JPEG"
    with Image.open(out) as img:
        assert img.format == "JPEG"
        assert img.size == (3, 2)
        assert len(img.convert("RGBA").tobytes()) == result.byte_length == 3 * 2 * 4


def test_cmyk_jpeg_inputs(make_image, settings, tmp_path):
    a = make_image("a.jpg", (2, 2), (0, 0, 0, 0), mode="CMYK", fmt="JPEG")
    b = make_image("b.jpg", (2, 2), (0, 0, 0, 255), mode="CMYK", fmt="JPEG")
    result = combine_files(a, b, tmp_path / "out.jpg", settings=settings)
    assert result.byte_length == 16
    assert (tmp_path / "out.jpg").exists()


def test_missing_input_fails_at_load(make_image, settings, tmp_path):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    with pytest.raises(DecodeError) as info:
        combine_files(a, tmp_path / "missing.png", tmp_path / "out.png", settings=settings)
    assert info.value.stage is None
    assert info.value.stage_name == "load"


def test_run_job_records_completion(make_image, settings, tmp_path):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    b = make_image("b.png", (2, 2), (9, 9, 9))
    run_job("job1", a, b, tmp_path / "out.png", settings)
    status = read_status("job1", settings)
    assert status["status"] == "completed"
    assert status["width"] == 2
    assert status["output"] == str(tmp_path / "out.png")
    assert json.loads((settings.jobs_dir / "job1.json").read_text())["state"] == "encoded"


def test_run_job_records_failure_stage(make_image, settings, tmp_path):
    a = make_image("a.png", (2, 2), (0, 0, 0))
    b = make_image("b.jpg", (2, 2), (0, 0, 0), fmt="JPEG")
    run_job("job2", a, b, tmp_path / "out.png", settings)
    status = read_status("job2", settings)
    assert status["status"] == "error"
    assert status["stage"] == "loaded"
    assert status["error_type"] == "FormatMismatchError"


def test_unknown_job(settings):
    assert read_status("nothing", settings) == {"job_id": "nothing", "status": "unknown"}
