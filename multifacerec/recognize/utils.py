from typing import Tuple

def _clip_rect(x: int, y: int, w: int, h: int, W: int, H: int) -> Tuple[int, int, int, int]:
    """(x,y,w,h) -> (x1,y1,x2,y2) clipped to a W x H frame."""
    x1 = max(0, min(W, int(x)))
    y1 = max(0, min(H, int(y)))
    x2 = max(0, min(W, int(x) + int(w)))
    y2 = max(0, min(H, int(y) + int(h)))
    return x1, y1, x2, y2
