import numpy as np
import pytest

from tripcodec.core_types import DenseImage


@pytest.fixture
def screenshot_rgb():
    """Light-grey canvas with a few UI-ish shapes."""
    arr = np.full((12, 16, 3), 240, dtype=np.uint8)
    arr[2:5, 3:9] = (20, 40, 200)
    arr[8, 1:15] = (0, 0, 0)
    arr[10, 10] = (255, 0, 128)
    return DenseImage(arr)


@pytest.fixture
def mask_gray():
    arr = np.zeros((9, 11), dtype=np.uint8)
    arr[1:4, 2:6] = 255
    arr[7, 9] = 17
    return DenseImage(arr)


@pytest.fixture
def noise_rgb():
    rng = np.random.default_rng(7)
    return DenseImage(rng.integers(0, 256, size=(5, 6, 3), dtype=np.uint8))
