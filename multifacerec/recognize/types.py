from dataclasses import dataclass, field
from typing import List, Tuple
import numpy as np

@dataclass
class FaceDet:
    x: int
    y: int
    w: int
    h: int
    eyes: List[Tuple[int, int, int, int]] = field(default_factory=list)  # (x,y,w,h) in FULL-frame coords

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)

@dataclass
class TermCriteria:
    max_iter: int = 0  # <= 0 means "use every training image"
    epsilon: float = 0.001

@dataclass
class SimilarObject:
    index: int
    distance: float
    label: str

@dataclass
class FrameResult:
    frame: np.ndarray  # annotated BGR frame
    faces: List[FaceDet]
    names: List[str]  # "" for unrecognized faces

    @property
    def count(self) -> int:
        return len(self.faces)

    @property
    def names_text(self) -> str:
        return ", ".join(self.names)
