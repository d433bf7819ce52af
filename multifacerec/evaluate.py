# multifacerec/evaluate.py
"""
evaluate.py
Eigen distance threshold tuning using the stored training set.
Assumptions:
- Training faces exist under TrainedFaces/ (as saved by enroll.py / recognise.py)
- Every label has several crops, otherwise it only contributes impostor pairs
Outputs:
- Prints summary stats for genuine/impostor eigen distances
- Suggests a threshold based on a target FAR
Run:
python -m multifacerec.evaluate
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import numpy as np
from .recognize.eigen import EigenObjectRecognizer
from .recognize.store import load_training_set
from .recognize.types import TermCriteria


# -------------------------
# Config
# -------------------------

@dataclass
class EvalConfig:
     train_dir: Path = Path("TrainedFaces")
     min_imgs_per_person: int = 2
     target_far: float = 0.01 # 1% FAR target
     thresholds: Tuple[float, float, float] = (0.0, 10000.0, 100.0) # start, end, step
     epsilon: float = 0.001


# -------------------------
# Math
# -------------------------

def eigen_distance(a: np.ndarray, b: np.ndarray) -> float:
     a = a.reshape(-1).astype(np.float32)
     b = b.reshape(-1).astype(np.float32)
     return float(np.linalg.norm(a - b))


# -------------------------
# IO
# -------------------------

def train_recognizer(cfg: EvalConfig) -> EigenObjectRecognizer:
     training = load_training_set(cfg.train_dir)
     if len(training) == 0:
          raise FileNotFoundError(f"No training faces in {cfg.train_dir}. Run enroll.py first.")
     return EigenObjectRecognizer(
          training.images,
          training.labels,
          0.0,
          TermCriteria(max_iter=len(training), epsilon=cfg.epsilon),
     )

def group_by_label(recognizer: EigenObjectRecognizer) -> Dict[str, List[np.ndarray]]:
     out: Dict[str, List[np.ndarray]] = {}
     for label, ev in zip(recognizer.labels, recognizer.eigen_values):
          out.setdefault(label, []).append(ev)
     return out


# -------------------------
# Eval
# -------------------------

def pairwise_distances(evs_a: List[np.ndarray], evs_b: List[np.ndarray], same: bool) -> List[float]:
     dists: List[float] = []
     if same:
          for i in range(len(evs_a)):
               for j in range(i + 1, len(evs_a)):
                    dists.append(eigen_distance(evs_a[i], evs_a[j]))
     else:
          for ea in evs_a:
               for eb in evs_b:
                    dists.append(eigen_distance(ea, eb))
     return dists

def sweep_thresholds(genuine: np.ndarray, impostor: np.ndarray, cfg: EvalConfig):
     t0, t1, step = cfg.thresholds
     thresholds = np.arange(t0, t1 + 1e-9, step, dtype=np.float64)

     # recognize() accepts dist < thr | FAR: impostor accepted | FRR: genuine rejected
     results = []
     for thr in thresholds:
          far = float(np.mean(impostor < thr)) if impostor.size else 0.0
          frr = float(np.mean(genuine >= thr)) if genuine.size else 0.0
          results.append((float(thr), far, frr))
     return results

def choose_threshold(results, target_far: float) -> Optional[Tuple[float, float, float]]:
     """Threshold with FAR <= target_far and minimal FRR (first one wins ties)."""
     best = None
     for thr, far, frr in results:
          if far <= target_far:
               if best is None or frr < best[2]:
                    best = (thr, far, frr)
     return best

def describe(arr: np.ndarray) -> str:
     if arr.size == 0:
          return "n=0"

     return (
          f"n={arr.size} mean={arr.mean():.1f} std={arr.std():.1f} "
          f"p05={np.percentile(arr, 5):.1f} p50={np.percentile(arr, 50):.1f} p95={np.percentile(arr, 95):.1f}"
     )

def main():
     cfg = EvalConfig()
     try:
          recognizer = train_recognizer(cfg)
     except (FileNotFoundError, ValueError) as e:
          print(e)
          return

     per_person = group_by_label(recognizer)
     names = sorted(per_person.keys())
     for name in names:
          if len(per_person[name]) < cfg.min_imgs_per_person:
               print(f"{name}: only {len(per_person[name])} crop(s), no genuine pairs (need >={cfg.min_imgs_per_person}).")

     print(f"Eigen space: {len(recognizer.eigen_images)} eigen images, {len(recognizer.labels)} training faces, {len(names)} labels")

     # Genuine
     genuine_all: List[float] = []
     for name in names:
          genuine_all.extend(pairwise_distances(per_person[name], per_person[name], same=True))

     # Impostor
     impostor_all: List[float] = []
     for i in range(len(names)):
          for j in range(i + 1, len(names)):
               impostor_all.extend(pairwise_distances(per_person[names[i]], per_person[names[j]], same=False))

     genuine = np.array(genuine_all, dtype=np.float32)
     impostor = np.array(impostor_all, dtype=np.float32)

     print("\n=== Eigen Distance Distributions ===")
     print(f"Genuine (same person): {describe(genuine)}")
     print(f"Impostor (diff persons): {describe(impostor)}")

     results = sweep_thresholds(genuine, impostor, cfg)
     best = choose_threshold(results, cfg.target_far)

     print("\n=== Threshold Sweep ===")
     stride = max(1, len(results) // 10)
     for thr, far, frr in results[::stride]:
          print(f"thr={thr:7.0f} FAR={far*100:5.2f}% FRR={frr*100:5.2f}%")

     if best is not None:
          thr, far, frr = best
          print(f"\nSuggested threshold (target FAR {cfg.target_far*100:.1f}%): thr={thr:.0f} FAR={far*100:.2f}% FRR={frr*100:.2f}%")
     else:
          print(f"\nNo threshold in range met FAR <= {cfg.target_far*100:.1f}%. Try widening threshold sweep range or collecting more varied samples.")

     print()

if __name__ == "__main__":
     main()
