"""
Test configuration and fixtures for colorgen tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from colorgen.main import app
from colorgen.utils.metrics import reset_metrics as _reset_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    _reset_metrics()


def encode_image(array: np.ndarray, fmt: str = "PNG") -> bytes:
    """Encode an (H, W, 3|4) uint8 array with Pillow."""
    buffer = io.BytesIO()
    Image.fromarray(array).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def violet_blocks_png():
    """128x64 PNG: a large violet block, a smaller orange block and a gray stripe."""
    img = np.zeros((64, 128, 3), dtype=np.uint8)
    img[:, :80] = (103, 80, 164)
    img[:, 80:112] = (230, 120, 40)
    img[:, 112:] = (128, 128, 128)
    return encode_image(img)


@pytest.fixture
def noisy_pixels():
    """3000 RGB pixels in three noisy clusters with well over 128 distinct colors."""
    rng = np.random.default_rng(7)
    centers = [((200, 40, 40), 1500), ((40, 160, 60), 1000), ((50, 70, 200), 500)]
    blocks = []
    for center, count in centers:
        noise = rng.integers(-20, 21, size=(count, 3))
        blocks.append(np.clip(np.array(center) + noise, 0, 255))
    return np.concatenate(blocks).astype(np.uint8)
