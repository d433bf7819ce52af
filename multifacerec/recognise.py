"""
Real-time multiple face detection and recognition:
camera -> resize 320x240 -> Haar (multi-face) -> gray 100x100 crops
-> eigenface recognizer (PCA) -> eigen distance threshold -> label each face.

Run:
python -m multifacerec.recognise

Keys:
q : quit
r : reload training set from disk (TrainedFaces/)
a : add the first visible face to the training set (name asked on the console)
e : toggle eye detection overlay
+/- : adjust eigen distance threshold live
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import cv2
from .camera import open_camera
from .enroll import enroll_face
from .recognize.detector import HaarFaceDetector
from .recognize.logger import RecognitionLogger
from .recognize.pipeline import DEFAULT_THRESHOLD, FaceRecognitionPipeline, draw_status
from .recognize.store import TrainingSet, load_training_set

@dataclass
class RecognizeConfig:
    train_dir: Path = Path("TrainedFaces")
    log_file: Path = Path("data/recognition_log.txt")
    camera_index: int = 0
    threshold: float = DEFAULT_THRESHOLD
    threshold_step: float = 250.0
    window: str = "recognize"

def load_or_warn(train_dir: Path) -> TrainingSet:
    try:
        training = load_training_set(train_dir)
    except ValueError as e:
        training = load_training_set(train_dir, partial=True)
        print(f"[store] Training set damaged ({e}), using the {len(training)} face(s) that loaded. Adding faces is disabled until it is fixed.")
        return training
    if len(training) == 0:
        print("[store] Nothing in the training set, add at least one face (key 'a' or python -m multifacerec.enroll).")
    return training

def main():
    cfg = RecognizeConfig()
    try:
        det = HaarFaceDetector()
        cap = open_camera(cfg.camera_index)
    except RuntimeError as e:
        print(f"[Error] {e}")
        return

    pipeline = FaceRecognitionPipeline(det, training=load_or_warn(cfg.train_dir), threshold=cfg.threshold)
    rec_logger = RecognitionLogger(str(cfg.log_file))

    print(f"Recognize (multi-face, eigenfaces) - {len(pipeline.training)} trained face(s)")
    print("q=quit, r=reload training set, a=add face, e=eyes, +/- threshold")

    status_msg = ""
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break

            result = pipeline.process(frame)
            rec_logger.update_scene(result.names)

            cv2.imshow(cfg.window, draw_status(result.frame, result, status_msg))
            key = cv2.waitKey(1) & 0xFF

            if key == ord('q'):
                break
            elif key == ord('r'):
                pipeline.set_training(load_or_warn(cfg.train_dir))
                status_msg = f"Reloaded {len(pipeline.training)} face(s)"
                print(f"[recognize] {status_msg}")
            elif key == ord('a'):
                name = input("Name for the new face: ").strip()
                try:
                    face = enroll_face(pipeline, frame, name, cfg.train_dir)
                except (RuntimeError, ValueError) as e:
                    status_msg = f"Training failed: {e}"
                else:
                    if face is None:
                        status_msg = "Training failed: no face detected"
                    else:
                        status_msg = f"{name} detected and added"
                print(f"[recognize] {status_msg}")
            elif key == ord('e'):
                try:
                    det.set_detect_eyes(not det.detect_eyes)
                except RuntimeError as e:
                    status_msg = str(e)
                else:
                    status_msg = f"Eyes {'ON' if det.detect_eyes else 'OFF'}"
            elif key in (ord('+'), ord('=')):
                pipeline.set_threshold(pipeline.threshold + cfg.threshold_step)
                status_msg = f"Threshold {pipeline.threshold:.0f}"
            elif key == ord('-'):
                pipeline.set_threshold(pipeline.threshold - cfg.threshold_step)
                status_msg = f"Threshold {pipeline.threshold:.0f}"
    finally:
        cap.release()
        cv2.destroyAllWindows()

if __name__ == "__main__":
    main()
