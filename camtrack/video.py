"""
Capture/display loop around a TrackingSession

Everything here is glue for interactive use: camera or file input, mouse
selection, drawing. The session itself never touches a window.
"""
import csv
import logging
import os
import time

import cv2

from .errors import TrackingError
from .geometry import Rect
from .session import TrackingSession

logger = logging.getLogger(__name__)

ESC = 27


class ROISelector:
    """Click-and-drag selection on an OpenCV window."""

    def __init__(self):
        self.start = None
        self.selection = None

    def _mouse_callback(self, event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            self.start = (x, y)
            self.selection = None
        elif event == cv2.EVENT_LBUTTONUP and self.start is not None:
            self.selection = Rect.from_points(self.start, (x, y))
            self.start = None

    def attach(self, window_name):
        cv2.setMouseCallback(window_name, self._mouse_callback)

    def take(self):
        """Return the finished selection once, or None."""
        selection, self.selection = self.selection, None
        return selection


def draw_rotated_track(frame, rotated, color=(0, 0, 255), thickness=3):
    """Draw the rotated track as an ellipse on `frame` (in place) and return it."""
    cv2.ellipse(frame, rotated.to_cv(), color, thickness, cv2.LINE_AA)
    return frame


def draw_track(frame, track, color=(0, 255, 0), thickness=1):
    x, y, w, h = track
    cv2.rectangle(frame, (x, y), (x + w, y + h), color, thickness)
    return frame


def save_frame(frame, frame_number, output_dir='results/frames'):
    os.makedirs(output_dir, exist_ok=True)
    filename = f"{output_dir}/Frame_{frame_number:04d}.png"
    cv2.imwrite(filename, frame)
    return filename


def save_predictions(path, rows):
    """Write `frame,x,y,w,h` rows to a CSV file."""
    parent = os.path.dirname(str(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['frame', 'x', 'y', 'w', 'h'])
        for frame_num, (x, y, w, h) in rows:
            writer.writerow([frame_num, int(x), int(y), int(w), int(h)])


def open_source(source):
    # a bare integer means a camera index
    if isinstance(source, str) and source.isdigit():
        source = int(source)
    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        raise FileNotFoundError(f'Cannot open video source: {source}')
    return cap


def run_video(source, session: TrackingSession = None, roi=None, display=True,
              save_csv=None, output_dir=None, window_name='CamShift',
              back_window_name='Backprojection'):
    """
    Drive `session` over every frame of `source`.

    Selection comes from `roi` when given, otherwise from a mouse drag on the
    display window ('r' clears it to select again, ESC quits). A failed
    selection or step is logged and the loop moves on to the next frame.

    Returns the list of (frame_number, track) rows produced.
    """
    if not display and roi is None:
        raise ValueError('A fixed roi is required when running without display')
    session = session if session is not None else TrackingSession()
    cap = open_source(source)
    selector = ROISelector()
    pending_roi = Rect(*roi) if roi is not None else None
    rows = []

    if display:
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        cv2.namedWindow(back_window_name, cv2.WINDOW_NORMAL)
        selector.attach(window_name)

    frame_count = 0
    start_time = time.time()
    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break
            frame_count += 1

            try:
                session.set_raw_frame(frame)
                selection = pending_roi or selector.take()
                if selection is not None:
                    pending_roi = None
                    session.set_selection(selection)
                    print(f"Selection set at frame {frame_count}: {tuple(selection)}")
                if session.histogram is not None:
                    session.step()
                    rows.append((frame_count, session.get_track()))
            except TrackingError as e:
                logger.error('Frame %d skipped: %s', frame_count, e)
                continue

            if session.histogram is not None and session.frame_count:
                annotated = frame.copy()
                draw_rotated_track(annotated, session.get_rotated_track())
                if output_dir:
                    save_frame(annotated, frame_count, output_dir)
                if display:
                    cv2.imshow(back_window_name, session.get_backprojection())
            else:
                annotated = frame

            if display:
                cv2.imshow(window_name, annotated)
                key = cv2.waitKey(1) & 0xFF
                if key == ESC:
                    print("\nTracking stopped by user")
                    break
                elif key == ord('r'):
                    session.reset()
    finally:
        cap.release()
        if display:
            cv2.destroyAllWindows()
            cv2.waitKey(1)

    total_time = time.time() - start_time
    fps = frame_count / total_time if total_time > 0 else 0.0
    print(f"\nTracking completed. Total frames: {frame_count}, {fps:.1f} FPS")

    if save_csv:
        save_predictions(save_csv, rows)
        print(f"Saved {len(rows)} predictions to {save_csv}")
    return rows
