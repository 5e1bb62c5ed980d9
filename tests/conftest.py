import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import page_stitcher
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from page_stitcher.stitching.config import StorageConfig  # noqa: E402


# Common test fixtures
@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing a solid-colour image and returning its path."""
    def _make(name: str, size=(50, 100), color=(200, 30, 30), mode="RGB", subdir="pages"):
        folder = tmp_path / subdir
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        Image.new(mode, size, color).save(path)
        return path
    return _make


@pytest.fixture
def storage(tmp_path: Path) -> StorageConfig:
    """Scratch and output roots inside tmp_path."""
    return StorageConfig(
        scratch_root=tmp_path / "scratch",
        output_root=tmp_path / "output",
    )


@pytest.fixture
def noisy_image(tmp_path: Path):
    """Factory writing a deterministic high-entropy RGB image."""
    def _make(name: str, size=(120, 160), seed: int = 7, subdir="pages"):
        folder = tmp_path / subdir
        folder.mkdir(parents=True, exist_ok=True)
        width, height = size
        data = bytearray()
        state = seed
        for _ in range(width * height * 3):
            # LCG keeps the pixels reproducible without numpy
            state = (state * 1103515245 + 12345) & 0x7FFFFFFF
            data.append(state >> 23)
        path = folder / name
        Image.frombytes("RGB", size, bytes(data)).save(path)
        return path
    return _make
