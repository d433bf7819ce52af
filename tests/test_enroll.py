import cv2
import numpy as np
import pytest

from multifacerec.enroll import enroll_face
from multifacerec.recognize.pipeline import FaceRecognitionPipeline
from multifacerec.recognize.store import LABELS_FILE, load_training_set

from .conftest import FakeDetector


def test_enrolled_face_is_persisted(tmp_path, faces):
    gray = np.zeros((240, 320), dtype=np.uint8)
    gray[20:120, 20:120] = faces[0]
    frame = cv2.merge([gray, gray, gray])

    pipeline = FaceRecognitionPipeline(FakeDetector([(20, 20, 100, 100)]))
    face = enroll_face(pipeline, frame, "alice", tmp_path)
    assert face is not None
    assert len(pipeline.training) == 1

    face = enroll_face(pipeline, frame, "alice", tmp_path)
    assert (tmp_path / LABELS_FILE).read_text(encoding="utf-8") == "2%alice%alice%"

    loaded = load_training_set(tmp_path)
    assert loaded.labels == ["alice", "alice"]
    assert np.array_equal(loaded.images[0], faces[0])


def test_no_face_writes_nothing(tmp_path):
    pipeline = FaceRecognitionPipeline(FakeDetector())
    assert enroll_face(pipeline, np.zeros((240, 320, 3), np.uint8), "alice", tmp_path) is None
    assert not (tmp_path / LABELS_FILE).exists()


def test_bad_name_rejected(tmp_path):
    pipeline = FaceRecognitionPipeline(FakeDetector([(0, 0, 50, 50)]))
    with pytest.raises(ValueError):
        enroll_face(pipeline, np.zeros((240, 320, 3), np.uint8), "a%b", tmp_path)
    assert len(pipeline.training) == 0
