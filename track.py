#!/usr/bin/env python3
"""CLI wrapper to track a colored object in a camera feed or video file.

Example:
  python track.py --source 0
  python track.py --source clip.mp4 --roi 40 40 20 20 --no-display --save-csv results/predictions.csv

Without --roi, drag a rectangle over the object in the display window.
"""
import argparse
import logging

from camtrack import TrackerConfig, TrackingSession
from camtrack.video import run_video

PARAMETER_FLAGS = ('hue_bins', 'sat_bins', 'val_bins', 'median_blur', 'threshold',
                   'min_width', 'min_height')


def main():
    p = argparse.ArgumentParser()
    p.add_argument('--source', default='0', help='Camera index or video file path')
    p.add_argument('--config', default=None, help='JSON file with TrackerConfig fields')
    p.add_argument('--roi', type=int, nargs=4, metavar=('X', 'Y', 'W', 'H'), default=None,
                   help='Initial selection; skips mouse selection')
    p.add_argument('--no-display', action='store_true', help='Run without OpenCV windows (requires --roi)')
    p.add_argument('--save-csv', default=None, help='Write frame,x,y,w,h predictions to this CSV')
    p.add_argument('--output-dir', default=None, help='Save annotated frames into this directory')
    p.add_argument('--log-level', default='INFO', help='Logging level (DEBUG, INFO, WARNING, ...)')
    for name in PARAMETER_FLAGS:
        p.add_argument(f"--{name.replace('_', '-')}", dest=name, type=int, default=None)
    args = p.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    config = TrackerConfig.from_json(args.config) if args.config else TrackerConfig()
    session = TrackingSession(config)
    for name in PARAMETER_FLAGS:
        value = getattr(args, name)
        if value is not None:
            session.set_parameter(name, value)

    print(f"Parameters: {session.parameters.as_dict()}")
    run_video(args.source, session, roi=args.roi, display=not args.no_display,
              save_csv=args.save_csv, output_dir=args.output_dir)


if __name__ == '__main__':
    main()
