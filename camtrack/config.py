"""
Session-wide tracker settings

TrackerConfig carries what stays fixed for the life of a session (histogram
ranges, mask band, search termination); the mutable tunables live in
ParameterStore and are seeded from the config's initial values.
"""
import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Tuple

import cv2

from .errors import InvalidParameter
from .parameters import ParameterStore

COLOR_CONVERSIONS = {
    'bgr': cv2.COLOR_BGR2HSV,
    'rgb': cv2.COLOR_RGB2HSV,
}


@dataclass
class TrackerConfig:
    # histogram ranges, upper bound exclusive
    hue_range: Tuple[float, float] = (0.0, 180.0)
    sat_range: Tuple[float, float] = (0.0, 256.0)
    val_range: Tuple[float, float] = (0.0, 256.0)

    # pixels outside this HSV band are excluded from histogram and map
    mask_lower: Tuple[int, int, int] = (0, 0, 0)
    mask_upper: Tuple[int, int, int] = (180, 256, 256)

    hue_bins: int = 20
    sat_bins: int = 10
    val_bins: int = 1
    median_blur: int = 3
    threshold: int = 40
    min_width: int = 20
    min_height: int = 20

    max_iterations: int = 10
    epsilon: float = 1.0
    normalize_histogram: bool = False
    color_order: str = 'bgr'

    # shape of the structuring elements, see morphology.py
    erosion_radius: int = 1
    dilation_radius: int = 3

    @classmethod
    def from_dict(cls, data) -> 'TrackerConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidParameter(f"Unknown config keys: {', '.join(sorted(unknown))}")
        kwargs = {}
        for key, value in data.items():
            # JSON has no tuples
            kwargs[key] = tuple(value) if isinstance(value, list) else value
        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def from_json(cls, path) -> 'TrackerConfig':
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f'Config not found: {path}')
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def ranges(self):
        return (tuple(self.hue_range), tuple(self.sat_range), tuple(self.val_range))

    @property
    def conversion(self) -> int:
        return COLOR_CONVERSIONS[self.color_order]

    def make_parameters(self) -> ParameterStore:
        return ParameterStore(
            hue_bins=self.hue_bins,
            sat_bins=self.sat_bins,
            val_bins=self.val_bins,
            median_blur=self.median_blur,
            threshold=self.threshold,
            min_width=self.min_width,
            min_height=self.min_height,
        )

    def validate(self) -> None:
        for name, (lo, hi) in zip(('hue_range', 'sat_range', 'val_range'), self.ranges):
            if not lo < hi:
                raise InvalidParameter(f'{name} lower bound must be below upper bound, got ({lo}, {hi})')
        if len(self.mask_lower) != 3 or len(self.mask_upper) != 3:
            raise InvalidParameter('mask_lower and mask_upper need one bound per channel')
        if any(lo > hi for lo, hi in zip(self.mask_lower, self.mask_upper)):
            raise InvalidParameter(f'mask band is empty: {self.mask_lower} - {self.mask_upper}')
        if self.color_order not in COLOR_CONVERSIONS:
            raise InvalidParameter(f'color_order must be one of {sorted(COLOR_CONVERSIONS)}, got {self.color_order!r}')
        if self.max_iterations < 1:
            raise InvalidParameter(f'max_iterations must be at least 1, got {self.max_iterations}')
        if self.epsilon <= 0:
            raise InvalidParameter(f'epsilon must be positive, got {self.epsilon}')
        if self.erosion_radius < 1 or self.dilation_radius < 1:
            raise InvalidParameter('structuring element radii must be at least 1')
        # the tunables go through the same checks set_parameter applies
        self.make_parameters()
