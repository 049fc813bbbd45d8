"""Shared test fixtures."""

import importlib.util
import shutil
from pathlib import Path

import pytest

from clipsplit.manifest import Manifest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def manifest(tmp_path: Path) -> Manifest:
    """A manifest pointing at a real (fake-content) input and an existing output dir."""
    video = tmp_path / "movie.mkv"
    video.write_bytes(b"\0" * 1000)
    out = tmp_path / "out"
    out.mkdir()
    return Manifest(input=video, output_dir=out, target_size_bytes=400)


def _load_generator():
    spec = importlib.util.spec_from_file_location(
        "generate_test_video", SCRIPTS_DIR / "generate_test_video.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def synthetic_video(tmp_path_factory):
    if shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None:
        pytest.skip("ffmpeg not available")
    generator = _load_generator()
    path = tmp_path_factory.mktemp("media") / "synthetic.mp4"
    generator.generate_test_video(path)
    return path, generator.COMMERCIALS
