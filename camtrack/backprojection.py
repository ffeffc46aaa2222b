"""
Likelihood map from a color histogram
"""
import cv2
import numpy as np

from .errors import HistogramPrecondition
from .histogram import CHANNELS


def backproject(hsv, histogram) -> np.ndarray:
    """
    Look up every pixel's (hue, saturation, value) bin and write its count.

    Counts above 255 saturate. The result is a new HxW uint8 array; the
    inputs are left untouched, so equal inputs give equal maps.
    """
    if histogram is None:
        raise HistogramPrecondition('Histogram has not been built; set a selection first')
    # wrap_channels=False keeps an (h, s, 1) histogram 3-D instead of a 1-channel 2-D Mat
    counts = cv2.Mat(histogram.counts, wrap_channels=False)
    return cv2.calcBackProject([hsv], CHANNELS, counts, histogram.flat_ranges, 1)
