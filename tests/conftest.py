import pytest
from PIL import Image

from pixelweave.config import Settings


@pytest.fixture
def make_image(tmp_path):
    def _make(name, size, color, mode="RGB", fmt="PNG"):
        path = tmp_path / name
        Image.new(mode, size, color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jobs_dir=tmp_path / "jobs",
        input_dir=tmp_path / "input",
        output_dir=tmp_path / "output",
    )
