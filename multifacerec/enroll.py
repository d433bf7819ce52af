# multifacerec/enroll.py
"""
enroll.py
Training tool for the eigenface recognizer:
camera -> resize 320x240 -> Haar detection -> first face -> gray 100x100 crop
Every captured face is appended to the training set and the whole set is
written back to disk right away, so the live recognizer can reload it.
Outputs:
- TrainedFaces/TrainedLabels.txt ("N%label1%...%labelN%")
- TrainedFaces/face<i>.bmp
Controls:
- SPACE: capture one face (if found)
- q: quit
Run:
python -m multifacerec.enroll
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import cv2
import numpy as np
from .camera import open_camera
from .recognize.detector import HaarFaceDetector
from .recognize.pipeline import FaceRecognitionPipeline, FACE_SIZE, draw_face, prepare_frame
from .recognize.store import load_training_set, save_training_set

# -------------------------
# Config
# -------------------------
@dataclass
class EnrollConfig:
     train_dir: Path = Path("TrainedFaces")
     camera_index: int = 0

     # UI
     window_main: str = "enroll"
     window_face: str = "trained_face"

# -------------------------
# Training
# -------------------------

def enroll_face(pipeline: FaceRecognitionPipeline, frame: np.ndarray, name: str, train_dir: Path) -> Optional[np.ndarray]:
     """
     Add the first face of frame under name and persist the training set.
     Returns the stored crop, or None when no face was found.
     Raises ValueError when the training set on disk was only partly loaded.
     """
     if not pipeline.training.complete:
          raise ValueError(f"Training set in {train_dir} is damaged, fix or remove it before adding faces")

     face = pipeline.capture_training_face(frame)
     if face is None:
          return None

     pipeline.add_face(face, name)
     save_training_set(train_dir, pipeline.training)
     return face

# -------------------------
# Main
# -------------------------

def main():
     cfg = EnrollConfig()
     name = input("Enter person name to enroll (e.g., Alice): ").strip()
     if not name:
          print("No name provided. Exiting.")
          return
     if "%" in name:
          print("Names cannot contain '%'. Exiting.")
          return

     try:
          training = load_training_set(cfg.train_dir)
     except ValueError as e:
          print(f"[enroll] Cannot load training set: {e}")
          return

     try:
          pipeline = FaceRecognitionPipeline(HaarFaceDetector(), training=training)
          cap = open_camera(cfg.camera_index)
     except RuntimeError as e:
          print(f"[enroll] {e}")
          return

     cv2.namedWindow(cfg.window_main, cv2.WINDOW_NORMAL)
     cv2.namedWindow(cfg.window_face, cv2.WINDOW_NORMAL)
     cv2.resizeWindow(cfg.window_face, 200, 200)
     cv2.imshow(cfg.window_face, np.zeros((FACE_SIZE[1], FACE_SIZE[0]), dtype=np.uint8))

     print(f"\nEnrollment started. {len(training)} face(s) already in {cfg.train_dir}/")
     print("Controls: SPACE=capture, q=quit\n")

     try:
          while True:
               ok, frame = cap.read()
               if not ok:
                    break

               vis = prepare_frame(frame)
               for f in pipeline.detector.detect(vis):
                    draw_face(vis, f, "")
               cv2.imshow(cfg.window_main, vis)

               key = cv2.waitKey(1) & 0xFF
               if key == ord("q"):
                    break

               if key == ord(" "): # SPACE
                    try:
                         face = enroll_face(pipeline, frame, name, cfg.train_dir)
                    except (RuntimeError, ValueError) as e:
                         print(f"[enroll] Training failed: {e}")
                         continue
                    if face is None:
                         print("[enroll] No face detected. Not captured.")
                    else:
                         cv2.imshow(cfg.window_face, face)
                         print(f"[enroll] {name}: face detected and added ({len(pipeline.training)} total)")
     finally:
          cap.release()
          cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
