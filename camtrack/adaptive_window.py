"""
Continuously adaptive mean-shift search with stability fallbacks
"""
import logging
from dataclasses import dataclass

import cv2

from .geometry import Rect, RotatedRect

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    rotated: RotatedRect
    track: Rect
    fallback_x: bool = False
    fallback_y: bool = False
    converged_mass: bool = True      # False when the window held no likelihood at all


class AdaptiveWindowTracker:
    """
    Moves the window to the centroid of the filtered map, re-estimating size
    and orientation from second moments, until the shift drops below
    `epsilon` or `max_iterations` is reached.

    Degenerate results are repaired rather than raised: sizes are floored at
    min_width / min_height (two independent floors), and a center on or
    outside the frame edge is replaced by the previous center, per axis.
    """

    def __init__(self, max_iterations=10, epsilon=1.0):
        self.max_iterations = max_iterations
        self.epsilon = epsilon

    @property
    def term_crit(self):
        return (cv2.TERM_CRITERIA_EPS | cv2.TERM_CRITERIA_COUNT, self.max_iterations, self.epsilon)

    def _start_window(self, initial_window, previous, frame_w, frame_h):
        window = Rect(*initial_window).clip_to(frame_w, frame_h)
        if window.is_empty and previous is not None:
            window = previous.bounding_rect().clip_to(frame_w, frame_h)
        return window

    def search(self, filtered_map, initial_window, previous, min_width=20, min_height=20) -> SearchResult:
        frame_h, frame_w = filtered_map.shape[:2]
        previous = previous if previous is not None else RotatedRect()
        window = self._start_window(initial_window, previous, frame_w, frame_h)

        if window.is_empty:
            # nowhere to search from; keep the previous estimate
            logger.warning('Search window %s has no overlap with the %dx%d frame',
                           tuple(initial_window), frame_w, frame_h)
            box = RotatedRect(previous.center, previous.size, previous.angle)
            found = False
        else:
            raw, _ = cv2.CamShift(filtered_map, tuple(window), self.term_crit)
            box = RotatedRect.from_cv(raw)
            found = box.size[0] > 0 and box.size[1] > 0

        width, height = box.size
        if width < min_width:
            width = float(min_width)
        if height < min_height:
            height = float(min_height)

        cx, cy = box.center
        fallback_x = cx <= 0 or cx > frame_w
        fallback_y = cy <= 0 or cy > frame_h
        if fallback_x:
            cx = previous.center[0]
        if fallback_y:
            cy = previous.center[1]
        if fallback_x or fallback_y:
            logger.debug('Center %s outside frame, reusing previous (%.1f, %.1f)',
                         box.center, cx, cy)
        # the previous center may itself miss a frame that changed size
        if cx <= 0 or cx > frame_w:
            cx = frame_w / 2.0
        if cy <= 0 or cy > frame_h:
            cy = frame_h / 2.0

        rotated = RotatedRect((float(cx), float(cy)), (float(width), float(height)), box.angle)
        track = rotated.bounding_rect().clip_to(frame_w, frame_h)
        return SearchResult(rotated, track, fallback_x, fallback_y, found)
