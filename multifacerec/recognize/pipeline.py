import cv2
import numpy as np
from typing import List, Optional, Tuple
from .types import FaceDet, FrameResult, TermCriteria
from .eigen import EigenObjectRecognizer
from .store import TrainingSet
from .utils import _clip_rect

FRAME_SIZE: Tuple[int, int] = (320, 240)  # (w, h) every frame is resized to
FACE_SIZE: Tuple[int, int] = (100, 100)  # (w, h) of training and test crops
DEFAULT_THRESHOLD = 3000.0
DEFAULT_EPSILON = 0.001

# BGR
FACE_COLOR = (0, 255, 255)  # yellow
LABEL_COLOR = (144, 238, 144)  # light green
EYE_COLOR = (255, 0, 0)  # blue

def prepare_frame(frame_bgr: np.ndarray, size: Tuple[int, int] = FRAME_SIZE) -> np.ndarray:
    return cv2.resize(frame_bgr, size, interpolation=cv2.INTER_CUBIC)

def crop_face(frame: np.ndarray, f: FaceDet, size: Tuple[int, int] = FACE_SIZE) -> Optional[np.ndarray]:
    """Gray face crop resized (cubic) so every crop compares at the same size."""
    H, W = frame.shape[:2]
    x1, y1, x2, y2 = _clip_rect(f.x, f.y, f.w, f.h, W, H)
    if x2 <= x1 or y2 <= y1:
        return None
    roi = frame[y1:y2, x1:x2]
    if roi.ndim == 3:
        roi = cv2.cvtColor(roi, cv2.COLOR_BGR2GRAY)
    return cv2.resize(roi, size, interpolation=cv2.INTER_CUBIC)

def draw_face(vis: np.ndarray, f: FaceDet, name: str) -> None:
    cv2.rectangle(vis, (f.x, f.y), (f.x + f.w, f.y + f.h), FACE_COLOR, 2)
    for (ex, ey, ew, eh) in f.eyes:
        cv2.rectangle(vis, (ex, ey), (ex + ew, ey + eh), EYE_COLOR, 2)
    if name:
        cv2.putText(vis, name, (f.x - 2, f.y - 2), cv2.FONT_HERSHEY_TRIPLEX, 0.5, LABEL_COLOR, 1, cv2.LINE_AA)

def draw_status(vis: np.ndarray, result: FrameResult, msg: str = "") -> np.ndarray:
    """Stack a status strip under the frame: face count, names and last message."""
    lines = [f"Faces: {result.count}", f"Names: {result.names_text}"]
    if msg:
        lines.append(msg)

    strip = np.zeros((22 * len(lines) + 8, vis.shape[1], 3), dtype=np.uint8)
    y = 20
    for line in lines:
        cv2.putText(strip, line, (6, y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1, cv2.LINE_AA)
        y += 22
    return np.vstack([vis, strip])

class FaceRecognitionPipeline:
    """
    Frame -> resize -> Haar faces -> gray 100x100 crops -> eigenface labels.
    The recognizer is retrained only when the training set changes.
    """
    def __init__(
        self,
        detector,
        training: Optional[TrainingSet] = None,
        threshold: float = DEFAULT_THRESHOLD,
        epsilon: float = DEFAULT_EPSILON,
        frame_size: Tuple[int, int] = FRAME_SIZE,
        face_size: Tuple[int, int] = FACE_SIZE,
    ):
        self.detector = detector
        self.training = training if training is not None else TrainingSet()
        self.threshold = float(threshold)
        self.epsilon = float(epsilon)
        self.frame_size = tuple(frame_size)
        self.face_size = tuple(face_size)

        self._recognizer: Optional[EigenObjectRecognizer] = None
        self._trained_on = -1

    def set_training(self, training: TrainingSet):
        self.training = training
        self.invalidate()

    def invalidate(self):
        self._recognizer = None
        self._trained_on = -1

    def set_threshold(self, threshold: float):
        self.threshold = max(0.0, float(threshold))
        if self._recognizer is not None:
            self._recognizer.eigen_distance_threshold = self.threshold

    @property
    def recognizer(self) -> Optional[EigenObjectRecognizer]:
        n = len(self.training)
        if n == 0:
            return None
        if self._recognizer is None or self._trained_on != n:
            self._recognizer = EigenObjectRecognizer(
                self.training.images,
                self.training.labels,
                self.threshold,
                TermCriteria(max_iter=n, epsilon=self.epsilon),
            )
            self._trained_on = n
        return self._recognizer

    def add_face(self, face: np.ndarray, label: str):
        self.training.add(face, label)
        self.invalidate()

    def capture_training_face(self, frame_bgr: np.ndarray) -> Optional[np.ndarray]:
        """First detected face of the frame, as a training crop."""
        small = prepare_frame(frame_bgr, self.frame_size)
        faces = self.detector.detect(cv2.cvtColor(small, cv2.COLOR_BGR2GRAY))
        for f in faces:
            return crop_face(small, f, self.face_size)
        return None

    def process(self, frame_bgr: np.ndarray) -> FrameResult:
        vis = prepare_frame(frame_bgr, self.frame_size)
        gray = cv2.cvtColor(vis, cv2.COLOR_BGR2GRAY)
        faces = self.detector.detect(gray)
        recognizer = self.recognizer

        names: List[str] = []
        for f in faces:
            face = crop_face(gray, f, self.face_size)
            name = ""
            if recognizer is not None and face is not None:
                name = recognizer.recognize(face)
            draw_face(vis, f, name)
            names.append(name)

        return FrameResult(frame=vis, faces=faces, names=names)
