"""
Persisted training set.

Layout of the training directory:
- TrainedLabels.txt: "N%label1%label2%...%labelN%"
- face1.bmp .. faceN.bmp: gray face crops, in label order
"""

import cv2
import numpy as np
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

LABELS_FILE = "TrainedLabels.txt"
SEPARATOR = "%"

def face_file(i: int) -> str:
    # 1-based, as written on disk
    return f"face{i}.bmp"

@dataclass
class TrainingSet:
    images: List[np.ndarray] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    complete: bool = True  # False when faces on disk could not be loaded

    def __len__(self) -> int:
        return len(self.images)

    def add(self, face: np.ndarray, label: str) -> None:
        label = label.strip()
        if not label:
            raise ValueError("Label must not be empty")
        if SEPARATOR in label:
            raise ValueError(f"Label must not contain '{SEPARATOR}': {label!r}")
        if face.ndim != 2:
            raise ValueError("Training faces must be single-channel gray images")
        self.images.append(face.astype(np.uint8))
        self.labels.append(label)

def load_training_set(train_dir: Path, partial: bool = False) -> TrainingSet:
    """
    Load the training set stored in train_dir.
    With partial=True a broken set does not raise: the faces read before
    the first missing one are kept and the set is marked incomplete.
    """
    labels_path = Path(train_dir) / LABELS_FILE
    if not labels_path.exists():
        return TrainingSet()

    parts = labels_path.read_text(encoding="utf-8").split(SEPARATOR)
    try:
        n = int(parts[0])
    except ValueError:
        if partial:
            return TrainingSet(complete=False)
        raise ValueError(f"Bad face count in {labels_path}: {parts[0]!r}") from None

    out = TrainingSet()
    if n < 0 or len(parts) < n + 1:
        if not partial:
            raise ValueError(f"{labels_path} lists {len(parts) - 1} labels, expected {n}")
        out.complete = False
        n = max(0, min(n, len(parts) - 1))

    for i in range(1, n + 1):
        img_path = Path(train_dir) / face_file(i)
        img = cv2.imread(str(img_path), cv2.IMREAD_GRAYSCALE)
        if img is None:
            if not partial:
                raise ValueError(f"Missing or unreadable training face: {img_path}")
            out.complete = False
            break
        out.images.append(img)
        out.labels.append(parts[i])
    return out

def save_training_set(train_dir: Path, training: TrainingSet) -> None:
    if not training.complete:
        raise ValueError(f"Training set in {train_dir} was only partly loaded, refusing to overwrite it")

    train_dir = Path(train_dir)
    train_dir.mkdir(parents=True, exist_ok=True)

    for i, img in enumerate(training.images, start=1):
        if not cv2.imwrite(str(train_dir / face_file(i)), img):
            raise RuntimeError(f"Failed to write {train_dir / face_file(i)}")

    text = f"{len(training)}{SEPARATOR}" + "".join(f"{l}{SEPARATOR}" for l in training.labels)
    (train_dir / LABELS_FILE).write_text(text, encoding="utf-8")
