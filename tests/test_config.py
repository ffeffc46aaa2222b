import json

import cv2
import pytest

from camtrack.config import TrackerConfig
from camtrack.errors import InvalidParameter


def test_defaults_match_documented_configuration():
    config = TrackerConfig()
    config.validate()
    assert config.ranges == ((0.0, 180.0), (0.0, 256.0), (0.0, 256.0))
    assert config.mask_lower == (0, 0, 0)
    assert config.mask_upper == (180, 256, 256)
    assert config.max_iterations == 10
    assert config.conversion == cv2.COLOR_BGR2HSV
    params = config.make_parameters()
    assert params.histogram_bins() == (20, 10, 1)


def test_from_dict_converts_lists_and_validates():
    config = TrackerConfig.from_dict({'mask_lower': [0, 60, 32], 'threshold': 80, 'color_order': 'rgb'})
    assert config.mask_lower == (0, 60, 32)
    assert config.threshold == 80
    assert config.conversion == cv2.COLOR_RGB2HSV


def test_unknown_keys_rejected():
    with pytest.raises(InvalidParameter, match='bogus'):
        TrackerConfig.from_dict({'bogus': 1})


@pytest.mark.parametrize('data', [
    {'median_blur': 4},
    {'threshold': 999},
    {'hue_range': [180, 0]},
    {'mask_lower': [0, 200, 0], 'mask_upper': [180, 100, 256]},
    {'color_order': 'yuv'},
    {'max_iterations': 0},
    {'epsilon': 0},
    {'dilation_radius': 0},
])
def test_invalid_values_rejected(data):
    with pytest.raises(InvalidParameter):
        TrackerConfig.from_dict(data)


def test_from_json(tmp_path):
    path = tmp_path / 'tracker.json'
    path.write_text(json.dumps({'hue_bins': 16, 'normalize_histogram': True}))
    config = TrackerConfig.from_json(path)
    assert config.hue_bins == 16
    assert config.normalize_histogram is True
    assert TrackerConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()


def test_from_json_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        TrackerConfig.from_json(tmp_path / 'missing.json')
