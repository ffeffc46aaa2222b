"""
Denoising of the likelihood map before the window search
"""
import cv2
import numpy as np


def cross_element(radius=1):
    """Plus-shaped structuring element of side 2 * radius + 1."""
    size = 2 * radius + 1
    return cv2.getStructuringElement(cv2.MORPH_CROSS, (size, size))


def diamond_element(radius=3):
    """Diamond (L1 ball) structuring element of side 2 * radius + 1."""
    idx = np.arange(2 * radius + 1)
    dist = np.abs(idx - radius)[:, None] + np.abs(idx - radius)[None, :]
    return (dist <= radius).astype(np.uint8)


class MorphologicalFilter:
    """
    mask -> threshold -> median -> erode (small cross) -> dilate (larger diamond)

    The larger dilation element biases the opening towards growth so the
    surviving target blob ends up reconnected and slightly enlarged.
    """

    def __init__(self, erosion_radius=1, dilation_radius=3):
        self.erosion_element = cross_element(erosion_radius)
        self.dilation_element = diamond_element(dilation_radius)

    def apply(self, likelihood, mask, threshold, median_blur):
        """Filter `likelihood` in place and return it."""
        if mask is not None:
            cv2.bitwise_and(likelihood, mask, dst=likelihood)
        cv2.threshold(likelihood, threshold, 255, cv2.THRESH_BINARY, dst=likelihood)
        cv2.medianBlur(likelihood, median_blur, dst=likelihood)
        cv2.erode(likelihood, self.erosion_element, dst=likelihood)
        cv2.dilate(likelihood, self.dilation_element, dst=likelihood)
        return likelihood
