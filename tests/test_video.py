import csv

import cv2
import numpy as np
import pytest

from camtrack import TrackingSession, video
from camtrack.geometry import RotatedRect
from camtrack.video import ROISelector, draw_rotated_track, run_video, save_predictions
from .frames import make_frame


class FakeCapture:
    def __init__(self, frames):
        self.frames = list(frames)
        self.released = False

    def isOpened(self):
        return True

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


def test_roi_selector_normalizes_drag():
    selector = ROISelector()
    assert selector.take() is None
    selector._mouse_callback(cv2.EVENT_LBUTTONDOWN, 60, 70, 0, None)
    selector._mouse_callback(cv2.EVENT_LBUTTONUP, 40, 40, 0, None)
    assert selector.take() == (40, 40, 20, 30)
    assert selector.take() is None


def test_draw_rotated_track_marks_frame():
    frame = make_frame()
    draw_rotated_track(frame, RotatedRect((50.0, 50.0), (30.0, 20.0), 0.0))
    assert frame[:, :, 2].any()
    assert not frame[50, 50].any()


def test_save_predictions(tmp_path):
    path = tmp_path / 'out' / 'predictions.csv'
    save_predictions(path, [(1, (40, 40, 20, 20)), (2, (42, 41, 21, 20))])
    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert rows[0] == {'frame': '1', 'x': '40', 'y': '40', 'w': '20', 'h': '20'}
    assert rows[1]['x'] == '42'


def test_headless_run_requires_roi():
    with pytest.raises(ValueError):
        run_video('missing.mp4', display=False)


def test_open_source_failure(monkeypatch):
    class Closed(FakeCapture):
        def isOpened(self):
            return False
    monkeypatch.setattr(video.cv2, 'VideoCapture', lambda source: Closed([]))
    with pytest.raises(FileNotFoundError):
        video.open_source('nowhere.mp4')


def test_headless_run_tracks_every_frame(monkeypatch, tmp_path):
    frames = [make_frame(square=(40 + 2 * i, 40, 20)) for i in range(5)]
    capture = FakeCapture(frames)
    monkeypatch.setattr(video, 'open_source', lambda source: capture)
    csv_path = tmp_path / 'predictions.csv'

    rows = run_video('clip.mp4', roi=(40, 40, 20, 20), display=False, save_csv=str(csv_path))

    assert [n for n, _ in rows] == [1, 2, 3, 4, 5]
    for _, (x, y, w, h) in rows:
        assert x >= 0 and y >= 0 and x + w <= 100 and y + h <= 100
    assert capture.released
    assert csv_path.exists()


def test_bad_selection_is_logged_and_skipped(monkeypatch, caplog):
    capture = FakeCapture([make_frame(square=(40, 40, 20)) for _ in range(3)])
    monkeypatch.setattr(video, 'open_source', lambda source: capture)
    session = TrackingSession()

    rows = run_video('clip.mp4', session, roi=(40, 40, 0, 20), display=False)

    assert rows == []
    assert session.histogram is None
    assert 'Frame 1 skipped' in caplog.text


def test_bad_frame_is_logged_and_skipped(monkeypatch, caplog):
    frames = [make_frame(square=(40, 40, 20)), np.zeros((100, 100), np.uint8), make_frame(square=(42, 40, 20))]
    monkeypatch.setattr(video, 'open_source', lambda source: FakeCapture(frames))

    rows = run_video('clip.mp4', roi=(40, 40, 20, 20), display=False)

    assert [n for n, _ in rows] == [1, 3]
    assert 'Frame 2 skipped' in caplog.text
