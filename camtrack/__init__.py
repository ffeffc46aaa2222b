"""
Color histogram object tracking with a continuously adaptive mean-shift window
"""
from .adaptive_window import AdaptiveWindowTracker, SearchResult
from .backprojection import backproject
from .config import TrackerConfig
from .errors import (
    TrackingError,
    InvalidSelection,
    InvalidParameter,
    FramePrecondition,
    HistogramPrecondition,
    NotYetAvailable,
)
from .geometry import Rect, RotatedRect
from .histogram import ColorHistogram, build_histogram, to_hsv
from .morphology import MorphologicalFilter
from .parameters import ParameterKind, ParameterStore
from .session import SessionState, TrackingSession

__all__ = [
    'AdaptiveWindowTracker',
    'SearchResult',
    'backproject',
    'TrackerConfig',
    'TrackingError',
    'InvalidSelection',
    'InvalidParameter',
    'FramePrecondition',
    'HistogramPrecondition',
    'NotYetAvailable',
    'Rect',
    'RotatedRect',
    'ColorHistogram',
    'build_histogram',
    'to_hsv',
    'MorphologicalFilter',
    'ParameterKind',
    'ParameterStore',
    'SessionState',
    'TrackingSession',
]
