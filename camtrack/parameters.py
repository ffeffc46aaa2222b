"""
Validated, mutable tracker tunables
"""
import logging
import numbers
from enum import Enum
from typing import Dict

from .errors import InvalidParameter

logger = logging.getLogger(__name__)

THRESHOLD_MAX = 255


class ParameterKind(Enum):
    HUE_BINS = 'hue_bins'
    SAT_BINS = 'sat_bins'
    VAL_BINS = 'val_bins'
    MEDIAN_BLUR = 'median_blur'
    THRESHOLD = 'threshold'
    MIN_WIDTH = 'min_width'
    MIN_HEIGHT = 'min_height'


def _non_negative(v):
    return v >= 0


def _odd_above_one(v):
    return v > 1 and v % 2 == 1


def _byte(v):
    return 0 <= v <= THRESHOLD_MAX


def _positive(v):
    return v >= 1


# kind -> (constraint message, predicate)
_RULES = {
    ParameterKind.HUE_BINS: ('must be greater than or equal to 0', _non_negative),
    ParameterKind.SAT_BINS: ('must be greater than or equal to 0', _non_negative),
    ParameterKind.VAL_BINS: ('must be greater than or equal to 0', _non_negative),
    ParameterKind.MEDIAN_BLUR: ('must be greater than 1 and odd', _odd_above_one),
    ParameterKind.THRESHOLD: (f'must be between 0 and {THRESHOLD_MAX}', _byte),
    ParameterKind.MIN_WIDTH: ('must be greater than or equal to 1', _positive),
    ParameterKind.MIN_HEIGHT: ('must be greater than or equal to 1', _positive),
}

DEFAULTS = {
    ParameterKind.HUE_BINS: 20,
    ParameterKind.SAT_BINS: 10,
    ParameterKind.VAL_BINS: 1,
    ParameterKind.MEDIAN_BLUR: 3,
    ParameterKind.THRESHOLD: 40,
    ParameterKind.MIN_WIDTH: 20,
    ParameterKind.MIN_HEIGHT: 20,
}


def parse_kind(kind) -> ParameterKind:
    """Accept a ParameterKind, its value ('median_blur') or its name ('MEDIAN_BLUR')."""
    if isinstance(kind, ParameterKind):
        return kind
    if isinstance(kind, str):
        try:
            return ParameterKind(kind.lower())
        except ValueError:
            pass
    raise InvalidParameter(f'Unknown parameter: {kind!r}')


class ParameterStore:
    """
    Holds the tunables read at the start of every processing step.

    set() either applies a value or raises InvalidParameter, leaving the
    prior value in place. Nothing is recomputed here: the histogram picks up
    new bin counts on the next selection, the filter and search read theirs
    on the next step.
    """

    def __init__(self, **overrides):
        self._values: Dict[ParameterKind, int] = dict(DEFAULTS)
        for name, value in overrides.items():
            self.set(name, value)

    def set(self, kind, value) -> None:
        kind = parse_kind(kind)
        message, predicate = _RULES[kind]
        # bool is an int subclass but never a meaningful count
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidParameter(f'{kind.name} must be an integer, got {value!r}')
        value = int(value)
        if not predicate(value):
            raise InvalidParameter(f'{kind.name} {message}, got {value}')
        old = self._values[kind]
        self._values[kind] = value
        if old != value:
            logger.debug('%s: %d -> %d', kind.name, old, value)

    def get(self, kind) -> int:
        return self._values[parse_kind(kind)]

    def histogram_bins(self):
        return (self._values[ParameterKind.HUE_BINS],
                self._values[ParameterKind.SAT_BINS],
                self._values[ParameterKind.VAL_BINS])

    def as_dict(self) -> Dict[str, int]:
        return {kind.value: value for kind, value in self._values.items()}
