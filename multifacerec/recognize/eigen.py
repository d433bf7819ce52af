import cv2
import numpy as np
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from .types import SimilarObject, TermCriteria

def _as_gray(img: np.ndarray) -> np.ndarray:
    img = np.asarray(img)
    if img.ndim == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    return img

def _basis(eigen_images: Sequence[np.ndarray]) -> np.ndarray:
    # (K, h*w) float32, one eigen image per row
    return np.stack([e.reshape(-1) for e in eigen_images], axis=0).astype(np.float32)

def calc_eigen_objects(
    images: Sequence[np.ndarray],
    term_crit: Optional[TermCriteria] = None,
) -> Tuple[List[np.ndarray], np.ndarray]:
    """
    Compute the eigen images and the average image of a training set.
    All images must be grayscale and share one size; histogram-normalized
    crops work best. At most term_crit.max_iter components are kept, and a
    component stops the sweep once its eigenvalue falls below
    term_crit.epsilon times the first one.
    """
    if len(images) == 0:
        raise ValueError("At least one training image is required")
    term_crit = term_crit or TermCriteria()

    grays = [_as_gray(img) for img in images]
    h, w = grays[0].shape[:2]
    for g in grays:
        if g.shape[:2] != (h, w):
            raise ValueError(f"Training images must share one size, got {g.shape[:2]} and {(h, w)}")

    max_iter = int(term_crit.max_iter)
    if max_iter <= 0 or max_iter > len(grays):
        max_iter = len(grays)

    data = np.stack([g.reshape(-1) for g in grays], axis=0).astype(np.float32)  # (N, h*w)
    if data.shape[0] == 1:
        return [], data[0].reshape(h, w).copy()

    mean, vectors, values = cv2.PCACompute2(data, np.empty((0)), maxComponents=max_iter)
    values = np.asarray(values, dtype=np.float64).reshape(-1)

    keep = 0
    if values.size and values[0] > 0:
        for v in values:
            if abs(v / values[0]) < term_crit.epsilon:
                break
            keep += 1

    eigen_images = [vectors[i].reshape(h, w).astype(np.float32) for i in range(keep)]
    avg = np.asarray(mean, dtype=np.float32).reshape(h, w)
    return eigen_images, avg

def eigen_decomposite(src: np.ndarray, eigen_images: Sequence[np.ndarray], avg: np.ndarray) -> np.ndarray:
    """Coefficients of src in the eigen space (one float per eigen image)."""
    src = _as_gray(src)
    if src.shape[:2] != avg.shape[:2]:
        raise ValueError(f"Image size {src.shape[:2]} does not match eigen space size {avg.shape[:2]}")
    if len(eigen_images) == 0:
        return np.zeros((0,), dtype=np.float32)

    row = src.reshape(1, -1).astype(np.float32)
    coeffs = cv2.PCAProject(row, avg.reshape(1, -1).astype(np.float32), _basis(eigen_images))
    return np.asarray(coeffs, dtype=np.float32).reshape(-1)

class EigenObjectRecognizer:
    """
    Object recognizer using PCA (eigen objects).
    Holds the eigen images, the average image, the decomposition of every
    training image and their labels. Recognition returns the label of the
    most similar training image when its eigen distance is below
    eigen_distance_threshold. A threshold <= 0 always returns the most
    similar object; a huge one (e.g. 5000) does the same in practice.
    """
    def __init__(
        self,
        images: Sequence[np.ndarray],
        labels: Optional[Sequence[str]] = None,
        eigen_distance_threshold: float = 0.0,
        term_crit: Optional[TermCriteria] = None,
    ):
        if labels is None:
            labels = [str(i) for i in range(len(images))]
        if len(images) != len(labels):
            raise ValueError(f"The number of images ({len(images)}) should equal the number of labels ({len(labels)})")
        if eigen_distance_threshold < 0.0:
            raise ValueError("Eigen-distance threshold should always be >= 0.0")

        self.eigen_images, self.average_image = calc_eigen_objects(images, term_crit)
        self.eigen_values: List[np.ndarray] = [
            eigen_decomposite(img, self.eigen_images, self.average_image) for img in images
        ]
        self.labels: List[str] = [str(l) for l in labels]
        self.eigen_distance_threshold = float(eigen_distance_threshold)

    @classmethod
    def from_arrays(
        cls,
        eigen_images: Sequence[np.ndarray],
        average_image: np.ndarray,
        eigen_values: Sequence[np.ndarray],
        labels: Sequence[str],
        eigen_distance_threshold: float = 0.0,
    ) -> "EigenObjectRecognizer":
        """Rebuild a recognizer from stored state, without retraining."""
        if len(eigen_values) != len(labels):
            raise ValueError("The number of eigen value vectors should equal the number of labels")
        obj = cls.__new__(cls)
        obj.eigen_images = [np.asarray(e, dtype=np.float32) for e in eigen_images]
        obj.average_image = np.asarray(average_image, dtype=np.float32)
        obj.eigen_values = [np.asarray(v, dtype=np.float32).reshape(-1) for v in eigen_values]
        obj.labels = [str(l) for l in labels]
        obj.eigen_distance_threshold = float(eigen_distance_threshold)
        return obj

    @property
    def image_size(self) -> Tuple[int, int]:
        h, w = self.average_image.shape[:2]
        return (w, h)

    def eigen_projection(self, eigen_value: np.ndarray) -> np.ndarray:
        """Reconstruct the projected uint8 image from its coefficients."""
        h, w = self.average_image.shape[:2]
        if len(self.eigen_images) == 0:
            rec = self.average_image.reshape(1, -1)
        else:
            coeffs = np.asarray(eigen_value, dtype=np.float32).reshape(1, -1)
            rec = cv2.PCABackProject(coeffs, self.average_image.reshape(1, -1), _basis(self.eigen_images))
        return np.clip(np.rint(rec), 0, 255).astype(np.uint8).reshape(h, w)

    def get_eigen_distances(self, image: np.ndarray) -> np.ndarray:
        """Euclidean eigen distance between image and every training image."""
        ev = eigen_decomposite(image, self.eigen_images, self.average_image)
        if ev.size == 0:
            return np.zeros((len(self.eigen_values),), dtype=np.float32)
        return np.array(
            [cv2.norm(ev, ev_i, cv2.NORM_L2) for ev_i in self.eigen_values],
            dtype=np.float32,
        )

    def find_most_similar_object(self, image: np.ndarray) -> SimilarObject:
        dist = self.get_eigen_distances(image)
        index = int(np.argmin(dist))  # first minimum wins ties
        return SimilarObject(index=index, distance=float(dist[index]), label=self.labels[index])

    def recognize(self, image: np.ndarray) -> str:
        """Label of the matching training image, or "" if not recognized."""
        best = self.find_most_similar_object(image)
        if self.eigen_distance_threshold <= 0 or best.distance < self.eigen_distance_threshold:
            return best.label
        return ""

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        h, w = self.average_image.shape[:2]
        if self.eigen_images:
            eig = np.stack(self.eigen_images, axis=0).astype(np.float32)
        else:
            eig = np.zeros((0, h, w), dtype=np.float32)
        np.savez(
            path,
            eigen_images=eig,
            average_image=self.average_image.astype(np.float32),
            eigen_values=np.stack(self.eigen_values, axis=0).astype(np.float32),
            labels=np.array(self.labels, dtype=str),
            eigen_distance_threshold=np.float64(self.eigen_distance_threshold),
        )

    @classmethod
    def load(cls, path: Path) -> "EigenObjectRecognizer":
        with np.load(str(path)) as data:
            return cls.from_arrays(
                eigen_images=list(data["eigen_images"]),
                average_image=data["average_image"],
                eigen_values=list(data["eigen_values"]),
                labels=[str(l) for l in data["labels"]],
                eigen_distance_threshold=float(data["eigen_distance_threshold"]),
            )
