"""
Tests for the persisted training set

Verifies:
- Faces and labels written to disk load back unchanged
- The label file keeps the "N%label%...%" layout
- A missing training set loads empty, a broken one is rejected
"""

import cv2
import numpy as np
import pytest

from multifacerec.recognize.store import (
    LABELS_FILE,
    TrainingSet,
    load_training_set,
    save_training_set,
)


def test_missing_directory_loads_empty(tmp_path):
    training = load_training_set(tmp_path / "TrainedFaces")
    assert len(training) == 0
    assert training.labels == []


def test_saved_set_loads_back(tmp_path, faces):
    training = TrainingSet()
    training.add(faces[0], "alice")
    training.add(faces[1], "bob")

    train_dir = tmp_path / "TrainedFaces"
    save_training_set(train_dir, training)

    assert (train_dir / LABELS_FILE).read_text(encoding="utf-8") == "2%alice%bob%"
    assert (train_dir / "face1.bmp").exists()
    assert (train_dir / "face2.bmp").exists()

    loaded = load_training_set(train_dir)
    assert loaded.labels == ["alice", "bob"]
    assert np.array_equal(loaded.images[0], faces[0])
    assert np.array_equal(loaded.images[1], faces[1])


def test_labels_with_spaces_survive(tmp_path, faces):
    training = TrainingSet()
    training.add(faces[0], "Ana Maria")
    save_training_set(tmp_path, training)
    assert load_training_set(tmp_path).labels == ["Ana Maria"]


def test_bad_count_rejected(tmp_path):
    (tmp_path / LABELS_FILE).write_text("many%alice%", encoding="utf-8")
    with pytest.raises(ValueError):
        load_training_set(tmp_path)


def test_count_larger_than_labels_rejected(tmp_path):
    (tmp_path / LABELS_FILE).write_text("3%alice%", encoding="utf-8")
    with pytest.raises(ValueError):
        load_training_set(tmp_path)


def test_missing_face_image_rejected(tmp_path, faces):
    cv2.imwrite(str(tmp_path / "face1.bmp"), faces[0])
    (tmp_path / LABELS_FILE).write_text("2%alice%bob%", encoding="utf-8")
    with pytest.raises(ValueError):
        load_training_set(tmp_path)


def test_add_rejects_separator_and_empty_labels(faces):
    training = TrainingSet()
    with pytest.raises(ValueError):
        training.add(faces[0], "50%off")
    with pytest.raises(ValueError):
        training.add(faces[0], "   ")
    assert len(training) == 0


def test_add_rejects_color_faces(faces):
    training = TrainingSet()
    with pytest.raises(ValueError):
        training.add(np.dstack([faces[0]] * 3), "alice")


def test_add_strips_label(faces):
    training = TrainingSet()
    training.add(faces[0], "  alice ")
    assert training.labels == ["alice"]


def _saved_three(tmp_path, faces):
    training = TrainingSet()
    for face, label in zip(faces, ["alice", "bob", "carol"]):
        training.add(face, label)
    save_training_set(tmp_path, training)


def test_partial_load_keeps_faces_before_missing_one(tmp_path, faces):
    _saved_three(tmp_path, faces)
    (tmp_path / "face3.bmp").unlink()

    loaded = load_training_set(tmp_path, partial=True)
    assert loaded.labels == ["alice", "bob"]
    assert loaded.complete is False
    assert np.array_equal(loaded.images[1], faces[1])


def test_partial_load_of_bad_count_is_empty(tmp_path):
    (tmp_path / LABELS_FILE).write_text("many%alice%", encoding="utf-8")
    loaded = load_training_set(tmp_path, partial=True)
    assert len(loaded) == 0
    assert loaded.complete is False


def test_complete_set_loads_as_complete(tmp_path, faces):
    _saved_three(tmp_path, faces)
    assert load_training_set(tmp_path, partial=True).complete is True


def test_incomplete_set_is_never_saved(tmp_path, faces):
    _saved_three(tmp_path, faces)
    (tmp_path / "face3.bmp").unlink()

    loaded = load_training_set(tmp_path, partial=True)
    loaded.add(faces[0], "dave")
    with pytest.raises(ValueError):
        save_training_set(tmp_path, loaded)
    assert (tmp_path / LABELS_FILE).read_text(encoding="utf-8") == "3%alice%bob%carol%"
