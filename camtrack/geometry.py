"""
Window types shared by the tracker: axis-aligned and rotated rectangles
"""
import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import cv2
import numpy as np


class Rect(NamedTuple):
    """Axis-aligned window (x, y, w, h), the format cv2.meanShift/CamShift take."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_points(cls, p1, p2) -> 'Rect':
        # a mouse drag can go in any direction
        x1, y1 = p1
        x2, y2 = p2
        return cls(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1))

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    def intersect(self, other) -> 'Rect':
        x1 = max(self.x, other[0])
        y1 = max(self.y, other[1])
        x2 = min(self.x + self.width, other[0] + other[2])
        y2 = min(self.y + self.height, other[1] + other[3])
        if x2 <= x1 or y2 <= y1:
            return Rect(0, 0, 0, 0)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def clip_to(self, width: int, height: int) -> 'Rect':
        return self.intersect((0, 0, width, height))


@dataclass
class RotatedRect:
    """
    Rotated window produced by the adaptive search.

    center and size are (float, float) pairs, angle is in degrees, the same
    layout cv2.CamShift returns and cv2.ellipse draws.
    """
    center: Tuple[float, float] = (0.0, 0.0)
    size: Tuple[float, float] = (0.0, 0.0)
    angle: float = 0.0

    @classmethod
    def from_cv(cls, box) -> 'RotatedRect':
        (cx, cy), (w, h), angle = box
        return cls((float(cx), float(cy)), (float(w), float(h)), float(angle))

    @classmethod
    def from_rect(cls, rect) -> 'RotatedRect':
        x, y, w, h = rect
        return cls((x + w / 2.0, y + h / 2.0), (float(w), float(h)), 0.0)

    def to_cv(self):
        return (tuple(self.center), tuple(self.size), self.angle)

    def points(self) -> np.ndarray:
        """Four corners as a (4, 2) float32 array."""
        return cv2.boxPoints(self.to_cv())

    def bounding_rect(self) -> Rect:
        """Smallest integer rectangle containing every corner, edges inclusive."""
        pts = self.points()
        x1 = math.floor(float(pts[:, 0].min()))
        y1 = math.floor(float(pts[:, 1].min()))
        x2 = math.ceil(float(pts[:, 0].max()))
        y2 = math.ceil(float(pts[:, 1].max()))
        return Rect(x1, y1, x2 - x1 + 1, y2 - y1 + 1)
