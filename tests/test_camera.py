import pytest

from multifacerec import camera


class ClosedCapture:
    opened = []

    def __init__(self, index):
        ClosedCapture.opened.append(index)

    def isOpened(self):
        return False


class OpenOnZero(ClosedCapture):
    def isOpened(self):
        return self.opened[-1] == 0


def test_unavailable_camera_raises(monkeypatch):
    ClosedCapture.opened = []
    monkeypatch.setattr(camera.cv2, "VideoCapture", ClosedCapture)
    with pytest.raises(RuntimeError):
        camera.open_camera(2)
    assert ClosedCapture.opened == [2, 0]


def test_falls_back_to_default_camera(monkeypatch):
    ClosedCapture.opened = []
    monkeypatch.setattr(camera.cv2, "VideoCapture", OpenOnZero)
    cap = camera.open_camera(1)
    assert isinstance(cap, OpenOnZero)
    assert ClosedCapture.opened == [1, 0]
