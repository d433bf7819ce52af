import numpy as np
import pytest

from multifacerec.recognize.types import FaceDet


class FakeDetector:
    """Returns the same boxes for every frame."""

    def __init__(self, rects=None):
        self.rects = list(rects or [])
        self.detect_eyes = False
        self.calls = 0

    def detect(self, image):
        self.calls += 1
        return [FaceDet(x=x, y=y, w=w, h=h) for (x, y, w, h) in self.rects]


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def faces(rng):
    """Three unrelated 100x100 gray 'faces'."""
    return [rng.integers(0, 256, (100, 100), dtype=np.uint8) for _ in range(3)]
