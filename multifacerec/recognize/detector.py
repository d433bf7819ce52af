import cv2
import numpy as np
from typing import List, Optional, Tuple
from .types import FaceDet

class HaarFaceDetector:
    def __init__(
        self,
        haar_xml: Optional[str] = None,
        eye_xml: Optional[str] = None,
        scale_factor: float = 1.2,
        min_neighbors: int = 10,
        min_size: Tuple[int, int] = (20, 20),
        detect_eyes: bool = False,
        debug: bool = False,
    ):
        self.debug = bool(debug)
        self.scale_factor = float(scale_factor)
        self.min_neighbors = int(min_neighbors)
        self.min_size = tuple(map(int, min_size))
        self.detect_eyes = bool(detect_eyes)

        if haar_xml is None:
            haar_xml = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"
        if eye_xml is None:
            eye_xml = cv2.data.haarcascades + "haarcascade_eye.xml"

        self.face_cascade = cv2.CascadeClassifier(haar_xml)
        if self.face_cascade.empty():
            raise RuntimeError(f"Failed to load Haar cascade: {haar_xml}")

        # loaded on first use
        self.eye_xml = eye_xml
        self._eye_cascade: Optional[cv2.CascadeClassifier] = None
        if self.detect_eyes:
            self._eyes()

    def set_detect_eyes(self, on: bool):
        """Toggle the eye pass; raises RuntimeError if the eye cascade cannot load."""
        if on:
            self._eyes()
        self.detect_eyes = bool(on)

    def _eyes(self) -> cv2.CascadeClassifier:
        if self._eye_cascade is None:
            cascade = cv2.CascadeClassifier(self.eye_xml)
            if cascade.empty():
                raise RuntimeError(f"Failed to load eye cascade: {self.eye_xml}")
            self._eye_cascade = cascade
        return self._eye_cascade

    def _haar_faces(self, gray: np.ndarray) -> np.ndarray:
        faces = self.face_cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            flags=cv2.CASCADE_DO_CANNY_PRUNING,
            minSize=self.min_size,
        )
        if faces is None or len(faces) == 0:
            return np.zeros((0, 4), dtype=np.int32)

        return np.asarray(faces).astype(np.int32) # (x,y,w,h)

    def _haar_eyes(self, gray: np.ndarray, x: int, y: int, w: int, h: int) -> List[Tuple[int, int, int, int]]:
        roi = gray[y:y + h, x:x + w]
        eyes = self._eyes().detectMultiScale(
            roi,
            scaleFactor=1.1,
            minNeighbors=10,
            flags=cv2.CASCADE_DO_CANNY_PRUNING,
            minSize=self.min_size,
        )
        if eyes is None or len(eyes) == 0:
            return []
        # offset ROI coords back to the frame
        return [(int(ex) + x, int(ey) + y, int(ew), int(eh)) for (ex, ey, ew, eh) in eyes]

    def detect(self, image: np.ndarray) -> List[FaceDet]:
        gray = image
        if image.ndim == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)

        faces = self._haar_faces(gray)
        out: List[FaceDet] = []
        for (x, y, w, h) in faces:
            f = FaceDet(x=int(x), y=int(y), w=int(w), h=int(h))
            if self.detect_eyes:
                f.eyes = self._haar_eyes(gray, f.x, f.y, f.w, f.h)
            out.append(f)

        if self.debug:
            print(f"[detector] {len(out)} face(s)")
        return out
