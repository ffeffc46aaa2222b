"""
Hue/saturation/value color model built from a selected region
"""
import logging
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from .errors import FramePrecondition, InvalidSelection
from .geometry import Rect

logger = logging.getLogger(__name__)

CHANNELS = [0, 1, 2]


def check_frame(frame):
    if frame is None or not isinstance(frame, np.ndarray) or frame.size == 0:
        raise FramePrecondition('Captured raw frame has not been set')
    if frame.ndim != 3 or frame.shape[2] != 3 or frame.dtype != np.uint8:
        raise FramePrecondition(
            f'Expected an 8-bit 3-channel frame, got shape {frame.shape} dtype {frame.dtype}')


def to_hsv(frame, conversion=cv2.COLOR_BGR2HSV, mask_lower=(0, 0, 0), mask_upper=(180, 256, 256)):
    """
    Convert a raw 8-bit 3-channel frame to HSV and compute its value mask.

    Returns:
        hsv: HxWx3 uint8 frame in OpenCV's HSV layout (hue in [0, 180))
        mask: HxW uint8, 255 where every channel lies inside the band
    """
    check_frame(frame)
    hsv = cv2.cvtColor(frame, conversion)
    mask = cv2.inRange(hsv,
                       np.array(mask_lower, dtype=np.float64),
                       np.array(mask_upper, dtype=np.float64))
    return hsv, mask


@dataclass(frozen=True, eq=False)
class ColorHistogram:
    """3-D bin counts over (hue, saturation, value) plus the layout that produced them."""
    counts: np.ndarray
    bins: Tuple[int, int, int]
    ranges: Tuple[Tuple[float, float], ...]

    @property
    def flat_ranges(self):
        # calcHist / calcBackProject want [h0, h1, s0, s1, v0, v1]
        return [float(b) for pair in self.ranges for b in pair]

    def total(self) -> float:
        return float(self.counts.sum())

    def is_empty(self) -> bool:
        return self.total() == 0.0


def effective_bins(bins) -> Tuple[int, int, int]:
    # a zero bin count collapses the channel to one bin, i.e. ignores it
    return tuple(max(1, int(b)) for b in bins)


def build_histogram(hsv, mask, selection, bins=(20, 10, 1),
                    ranges=((0, 180), (0, 256), (0, 256)), normalize=False) -> ColorHistogram:
    """
    Accumulate a 3-D histogram over the selected region of an HSV frame.

    Pixels outside the mask get zero weight. The selection is clipped to the
    frame; a selection with no pixels inside the frame is rejected.
    """
    if hsv is None:
        raise FramePrecondition('Captured raw frame has not been set')
    x, y, w, h = selection
    if w <= 0 or h <= 0:
        raise InvalidSelection(f'Invalid selection {tuple(selection)}: width and height must be positive')

    frame_h, frame_w = hsv.shape[:2]
    region = Rect(x, y, w, h).clip_to(frame_w, frame_h)
    if region.is_empty:
        raise InvalidSelection(f'Selection {tuple(selection)} lies outside the {frame_w}x{frame_h} frame')

    rx, ry, rw, rh = region
    roi = hsv[ry:ry + rh, rx:rx + rw]
    roi_mask = mask[ry:ry + rh, rx:rx + rw] if mask is not None else None

    bins = effective_bins(bins)
    ranges = tuple((float(lo), float(hi)) for lo, hi in ranges)
    flat = [b for pair in ranges for b in pair]
    counts = cv2.calcHist([roi], CHANNELS, roi_mask, list(bins), flat)

    if normalize:
        cv2.normalize(counts, counts, 0, 255, cv2.NORM_MINMAX)

    hist = ColorHistogram(counts=counts, bins=bins, ranges=ranges)
    logger.debug('Histogram %s over %s: mass %.0f', bins, tuple(region), hist.total())
    return hist
