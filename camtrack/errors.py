"""
Errors raised at the public boundary of the tracking session
"""


class TrackingError(Exception):
    """Base class for every tracker failure a driving loop may catch and log."""


class InvalidSelection(TrackingError, ValueError):
    """Selection rectangle has a non-positive width/height or misses the frame."""


class InvalidParameter(TrackingError, ValueError):
    """Parameter value outside the documented range for its kind."""


class FramePrecondition(TrackingError, RuntimeError):
    """Operation needs a raw frame but none (or an unusable one) was set."""


class HistogramPrecondition(TrackingError, RuntimeError):
    """Backprojection or search attempted before a histogram exists."""


class NotYetAvailable(TrackingError, RuntimeError):
    """Accessor called before the artifact it returns was produced."""
