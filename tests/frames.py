import cv2
import numpy as np

RED = (0, 0, 255)      # BGR
BLUE = (255, 0, 0)
GREEN = (0, 255, 0)


def make_frame(size=100, square=None, color=RED, background=(0, 0, 0)):
    """Uniform frame with an optional filled square (x, y, side)."""
    frame = np.zeros((size, size, 3), dtype=np.uint8)
    frame[:] = background
    if square is not None:
        x, y, side = square
        cv2.rectangle(frame, (x, y), (x + side - 1, y + side - 1), color, -1)
    return frame
