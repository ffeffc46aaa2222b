"""
Per-frame tracking session: the state machine tying the pipeline together
"""
import logging
from enum import Enum

import numpy as np

from .adaptive_window import AdaptiveWindowTracker
from .backprojection import backproject
from .config import TrackerConfig
from .errors import FramePrecondition, HistogramPrecondition, InvalidSelection, NotYetAvailable
from .geometry import Rect, RotatedRect
from .histogram import build_histogram, check_frame, to_hsv
from .morphology import MorphologicalFilter
from .parameters import ParameterKind

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = 'idle'                # no raw frame yet
    FRAME_READY = 'frame_ready'  # frame set, no histogram
    TRACKING = 'tracking'        # histogram built, track maintained


class TrackingSession:
    """
    Tracks one colored object across frames.

    Usage:
        session = TrackingSession()
        session.set_raw_frame(first)
        session.set_selection((x, y, w, h))
        for frame in frames:
            session.set_raw_frame(frame)
            session.step()
            box = session.get_rotated_track()

    Not safe for concurrent use; a single driving loop owns the session.
    """

    def __init__(self, config: TrackerConfig = None):
        self.config = config if config is not None else TrackerConfig()
        self.config.validate()
        self.parameters = self.config.make_parameters()
        self.filter = MorphologicalFilter(self.config.erosion_radius, self.config.dilation_radius)
        self.searcher = AdaptiveWindowTracker(self.config.max_iterations, self.config.epsilon)

        self._frame = None
        self._histogram = None
        self._backprojection = None
        self._track = None
        self._rotated = None
        # center source when the search result leaves the frame
        self._fallback = None
        self.frame_count = 0

    # ---------- state ----------
    @property
    def state(self) -> SessionState:
        if self._histogram is not None:
            return SessionState.TRACKING
        if self._frame is not None:
            return SessionState.FRAME_READY
        return SessionState.IDLE

    @property
    def histogram(self):
        return self._histogram

    def reset(self) -> None:
        """Drop the histogram and every track artifact; the raw frame is kept."""
        self._histogram = None
        self._backprojection = None
        self._track = None
        self._rotated = None
        self._fallback = None
        self.frame_count = 0
        logger.debug('Tracking state reset')

    # ---------- transitions ----------
    def set_raw_frame(self, frame) -> None:
        check_frame(frame)
        self._frame = frame

    def _hsv(self):
        if self._frame is None:
            raise FramePrecondition('Captured raw frame has not been set')
        return to_hsv(self._frame, self.config.conversion,
                      self.config.mask_lower, self.config.mask_upper)

    def set_selection(self, rect) -> None:
        """Build the color model from `rect` on the current frame and start tracking there."""
        try:
            selection = Rect(*(int(v) for v in rect))
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidSelection(f'Invalid selection {rect!r}: {e}') from None
        if selection.is_empty:
            raise InvalidSelection(f'Invalid selection {tuple(selection)}: width and height must be positive')
        hsv, mask = self._hsv()
        histogram = build_histogram(
            hsv, mask, selection,
            bins=self.parameters.histogram_bins(),
            ranges=self.config.ranges,
            normalize=self.config.normalize_histogram,
        )

        self.reset()
        self._histogram = histogram
        self._track = selection
        frame_h, frame_w = hsv.shape[:2]
        self._fallback = RotatedRect.from_rect(selection.clip_to(frame_w, frame_h))
        logger.info('Selection %s set, histogram mass %.0f', tuple(selection), histogram.total())

    def step(self) -> None:
        """Run backprojection, filtering and the adaptive search on the current frame."""
        if self._histogram is None:
            raise HistogramPrecondition('Histogram has not been built; set a selection first')
        hsv, mask = self._hsv()

        likelihood = backproject(hsv, self._histogram)
        self.filter.apply(
            likelihood, mask,
            self.parameters.get(ParameterKind.THRESHOLD),
            self.parameters.get(ParameterKind.MEDIAN_BLUR),
        )

        previous = self._rotated if self._rotated is not None else self._fallback
        result = self.searcher.search(
            likelihood, self._track, previous,
            min_width=self.parameters.get(ParameterKind.MIN_WIDTH),
            min_height=self.parameters.get(ParameterKind.MIN_HEIGHT),
        )

        self._backprojection = likelihood
        self._rotated = result.rotated
        self._track = result.track
        self.frame_count += 1
        logger.debug('Frame %d: center (%.1f, %.1f) size (%.1f, %.1f) angle %.1f%s',
                     self.frame_count, *result.rotated.center, *result.rotated.size,
                     result.rotated.angle, '' if result.converged_mass else ' [no mass]')

    def process(self, frame) -> RotatedRect:
        self.set_raw_frame(frame)
        self.step()
        return self._rotated

    # ---------- accessors ----------
    def get_backprojection(self) -> np.ndarray:
        if self._backprojection is None or self._backprojection.size == 0:
            raise NotYetAvailable('Backprojection has not been set')
        return self._backprojection

    def get_track(self) -> Rect:
        if self._track is None or self._track.is_empty:
            raise NotYetAvailable('Track has not been set')
        return self._track

    def get_rotated_track(self) -> RotatedRect:
        if self._rotated is None:
            raise NotYetAvailable('Rotated track has not been set')
        return self._rotated

    # ---------- parameters ----------
    def set_parameter(self, kind, value) -> None:
        self.parameters.set(kind, value)

    def get_parameter(self, kind) -> int:
        return self.parameters.get(kind)
